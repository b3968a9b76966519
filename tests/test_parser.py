"""Tests for task file parsing and loading."""
# pyright: reportPrivateUsage=false

from pathlib import Path
from typing import Any

import pytest

from ganttbars.exceptions import IdentityCollisionError, ParseError, ValidationError
from ganttbars.loader import load_chart, load_document
from ganttbars.parser import ChartParser
from ganttbars.styling import BAR_COMPLETED, BAR_DASHED


class TestChartParser:
    """Test the ChartParser."""

    @pytest.fixture
    def parser(self) -> ChartParser:
        """Create a parser instance."""
        return ChartParser()

    def test_parse_file(self, parser: ChartParser, fixtures_dir: Path) -> None:
        """Test parsing the split-task fixture."""
        document = parser.parse_file(fixtures_dir / "split_tasks.yaml")

        assert document.metadata.version == "1"
        assert document.metadata.title == "Release plan"
        assert [task.id for task in document.tasks] == ["A", "B", "C"]

        task_a = document.get_task_by_id("A")
        assert task_a is not None
        assert task_a.style_class == BAR_DASHED
        assert task_a.bars is not None
        assert [bar.id for bar in task_a.bars] == ["a1", "a2"]
        assert task_a.bars[0].start == "2025-01-01 08:00"
        assert task_a.bars[1].progress == 50
        assert task_a.bars[1].style_class == BAR_COMPLETED
        assert task_a.get_bar_spec("a2") is task_a.bars[1]

    def test_yaml_dates_become_strings(self, parser: ChartParser, fixtures_dir: Path) -> None:
        """Test unquoted YAML dates are kept as ISO strings."""
        document = parser.parse_file(fixtures_dir / "split_tasks.yaml")
        task_b = document.get_task_by_id("B")
        assert task_b is not None
        assert task_b.start == "2025-01-02"

    def test_comma_separated_dependencies(self, parser: ChartParser, fixtures_dir: Path) -> None:
        """Test a dependency string is split on commas."""
        document = parser.parse_file(fixtures_dir / "split_tasks.yaml")
        task_c = document.get_task_by_id("C")
        assert task_c is not None
        assert task_c.dependencies == ["B", "ghost"]

    def test_task_without_bars_key(self, parser: ChartParser) -> None:
        """Test omitted bars stay None and an empty list stays empty."""
        document = parser.parse_data({"tasks": [{"id": "A"}, {"id": "B", "bars": []}]})
        assert document.tasks[0].bars is None
        assert document.tasks[1].bars == []

    def test_bar_without_start_parses(self, parser: ChartParser) -> None:
        """Test a bar missing start is left for the expander to report."""
        data: dict[str, Any] = {"tasks": [{"id": "A", "bars": [{"id": "a1", "duration": "1d"}]}]}
        document = parser.parse_data(data)
        assert document.tasks[0].bars is not None
        assert document.tasks[0].bars[0].start is None

    def test_numeric_ids(self, parser: ChartParser) -> None:
        """Test numeric ids are coerced to strings."""
        document = parser.parse_data({"tasks": [{"id": 1}, {"id": 2, "dependencies": [1]}]})
        assert document.tasks[1].dependencies == ["1"]
        assert document.tasks[0].id == "1"

    def test_progress_out_of_range(self, parser: ChartParser) -> None:
        """Test invalid progress fails schema validation."""
        with pytest.raises(ValidationError, match="Invalid task file structure"):
            parser.parse_data({"tasks": [{"id": "A", "progress": 150}]})

    def test_missing_task_id(self, parser: ChartParser) -> None:
        """Test every task needs an id."""
        with pytest.raises(ValidationError):
            parser.parse_data({"tasks": [{"name": "Nameless"}]})

    def test_parse_nonexistent_file(self, parser: ChartParser) -> None:
        """Test parsing a nonexistent file."""
        with pytest.raises(ParseError, match="File not found"):
            parser.parse_file("nonexistent.yaml")

    def test_invalid_yaml(self, parser: ChartParser, tmp_path: Path) -> None:
        """Test malformed YAML is reported as a parse error."""
        path = tmp_path / "bad.yaml"
        path.write_text("tasks: [unclosed\n", encoding="utf-8")
        with pytest.raises(ParseError, match="Failed to parse YAML"):
            parser.parse_file(path)

    def test_non_mapping_root(self, parser: ChartParser, tmp_path: Path) -> None:
        """Test a list at the root is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- id: A\n", encoding="utf-8")
        with pytest.raises(ParseError, match="dictionary at the root"):
            parser.parse_file(path)

    def test_json_input(self, parser: ChartParser, tmp_path: Path) -> None:
        """Test JSON task files parse too."""
        path = tmp_path / "tasks.json"
        path.write_text('{"tasks": [{"id": "A", "start": "2025-01-01", "duration": "1d"}]}')
        assert parser.parse_file(path).tasks[0].duration == "1d"


class TestLoadChart:
    """Test loading a task file into a chart."""

    def test_load_and_render(self, fixtures_dir: Path) -> None:
        """Test the full pipeline from a file."""
        document, chart = load_chart(fixtures_dir / "split_tasks.yaml")
        result = chart.render()

        assert document.metadata.title == "Release plan"
        assert [bar.key for bar in result.bars] == [("A", 0), ("A", 1), ("B", 0), ("C", 0)]
        assert [arrow.label for arrow in result.arrows] == ["A[1] -> B[0]", "B[0] -> C[0]"]
        assert [d.dependency for d in result.diagnostics] == ["ghost"]
        assert [bar.display_class for bar in result.bars] == [
            BAR_DASHED,
            BAR_COMPLETED,
            "bar-solid",
            "bar-solid",
        ]

    def test_broken_bar(self, fixtures_dir: Path) -> None:
        """Test a broken bar spec only removes its own task."""
        _, chart = load_chart(fixtures_dir / "broken_bar.yaml")
        result = chart.render()
        assert [bar.task_id for bar in result.bars] == ["B"]
        assert result.errors[0].task_id == "A"
        assert result.arrows == []

    def test_duplicate_ids(self, fixtures_dir: Path) -> None:
        """Test duplicate task ids fail when loading."""
        with pytest.raises(IdentityCollisionError):
            load_chart(fixtures_dir / "duplicate_ids.yaml")

    def test_explicit_config_path(self, fixtures_dir: Path) -> None:
        """Test an explicit config changes defaults."""
        _, chart = load_chart(
            fixtures_dir / "split_tasks.yaml", fixtures_dir / "custom_config.yaml"
        )
        assert chart.config.default_class == BAR_DASHED
        assert chart.render().bars[-1].display_class == BAR_DASHED

    def test_config_discovered_next_to_file(self, tmp_path: Path) -> None:
        """Test ganttbars_config.yaml beside the task file is picked up."""
        (tmp_path / "ganttbars_config.yaml").write_text(
            "chart:\n  reference_date: 2025-06-01\n  default_duration: 3h\n", encoding="utf-8"
        )
        tasks = tmp_path / "tasks.yaml"
        tasks.write_text("tasks:\n  - id: A\n", encoding="utf-8")

        _, chart = load_chart(tasks)
        (bar,) = chart.render().bars
        assert bar.start.isoformat() == "2025-06-01T00:00:00"
        assert bar.end.isoformat() == "2025-06-01T03:00:00"

    def test_load_document(self, fixtures_dir: Path) -> None:
        """Test parsing without building a chart leaves tasks unstamped."""
        document = load_document(fixtures_dir / "split_tasks.yaml")
        assert all(task.index is None for task in document.tasks)
