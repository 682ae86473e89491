"""Tests for project file parsing and loading."""

from pathlib import Path

import pytest

from backplan import load_project, validate_project
from backplan.exceptions import CycleDetectedError, ParseError, ValidationError
from backplan.parser import ProjectParser


class TestProjectParser:
    """YAML and JSON project files."""

    def test_parse_yaml(self, fixtures_dir: Path) -> None:
        project = load_project(fixtures_dir / "launch.yaml")

        assert project.id == "launch"
        assert project.name == "Product launch"
        assert [t.id for t in project.tasks] == [
            "research",
            "design",
            "build",
            "docs",
            "review",
            "launch",
        ]
        # Unquoted YAML dates come back as ISO strings
        assert project.anchors == {"launch": "2026-03-02"}

    def test_duration_shorthand(self, fixtures_dir: Path) -> None:
        project = load_project(fixtures_dir / "launch.yaml")

        design = project.get_task("design")
        review = project.get_task("review")
        assert design is not None and review is not None
        assert (design.duration_days, design.duration_minutes) == (3, None)
        assert (review.duration_days, review.duration_minutes) == (0, 90)
        assert not review.all_day

    def test_subtasks_and_milestone(self, fixtures_dir: Path) -> None:
        project = load_project(fixtures_dir / "launch.yaml")

        launch = project.get_task("launch")
        assert launch is not None
        assert launch.is_milestone
        assert [(s.id, s.completed) for s in launch.subtasks] == [("press", False), ("blog", True)]
        assert launch.dependencies == ("review",)

    def test_parse_json(self, fixtures_dir: Path) -> None:
        project = load_project(fixtures_dir / "launch.json")

        assert project.id == "launch-json"
        ship = project.get_task("ship")
        assert ship is not None
        assert ship.duration_minutes == 60
        assert project.anchors == {"ship": "2026-03-02T12:00"}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError, match="File not found"):
            load_project(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("tasks: [unclosed\n")
        with pytest.raises(ParseError, match="Failed to parse"):
            load_project(path)

    def test_root_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ParseError, match="mapping at the root"):
            load_project(path)

    def test_task_without_id(self) -> None:
        with pytest.raises(ValidationError, match="Invalid project structure"):
            ProjectParser().parse_data({"tasks": [{"name": "no id"}]})

    def test_shorthand_conflicts_with_explicit_duration(self) -> None:
        data = {"tasks": [{"id": "a", "duration": "2d", "duration_days": 2}]}
        with pytest.raises(ValidationError, match="cannot combine"):
            ProjectParser().parse_data(data)

    def test_bad_shorthand(self) -> None:
        with pytest.raises(ValidationError, match="Could not parse duration"):
            ProjectParser().parse_data({"tasks": [{"id": "a", "duration": "soon"}]})

    def test_numeric_ids_and_single_dependency(self) -> None:
        project = ProjectParser().parse_data(
            {
                "tasks": [
                    {"id": 1, "duration_days": 1},
                    {"id": 2, "duration_days": 1, "dependencies": 1},
                ]
            }
        )
        assert [t.id for t in project.tasks] == ["1", "2"]
        assert project.tasks[1].dependencies == ("1",)

    def test_anchor_value_must_be_date(self) -> None:
        with pytest.raises(ValidationError, match="must be a date"):
            ProjectParser().parse_data({"tasks": [{"id": "a"}], "anchors": {"a": 5}})

    def test_empty_sections(self) -> None:
        project = ProjectParser().parse_data({"name": "Empty", "tasks": None, "anchors": None})
        assert project.tasks == []
        assert project.anchors == {}


class TestValidateProject:
    """Graph validation without scheduling."""

    def test_valid(self, fixtures_dir: Path) -> None:
        project = load_project(fixtures_dir / "launch.yaml")
        assert validate_project(project) == []

    def test_cycle(self, fixtures_dir: Path) -> None:
        project = load_project(fixtures_dir / "cycle.yaml")
        with pytest.raises(CycleDetectedError):
            validate_project(project)
