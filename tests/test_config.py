"""Tests for configuration loading."""

from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from ganttbars.config import ChartConfig, GanttBarsConfig, load_config


class TestChartConfig:
    """Test ChartConfig validation."""

    def test_defaults(self) -> None:
        """Test default values."""
        config = ChartConfig()
        assert config.default_class == "bar-solid"
        assert config.default_duration == "2d"
        assert config.reference_date is None
        assert config.check_identity is True
        assert config.strict is False

    def test_invalid_default_duration(self) -> None:
        """Test the default duration must be a duration token."""
        with pytest.raises(ValidationError, match="default_duration"):
            ChartConfig(default_duration="2 weeks")

    def test_blank_default_class(self) -> None:
        """Test the default class may not be blank."""
        with pytest.raises(ValidationError, match="default_class"):
            ChartConfig(default_class="  ")


class TestLoadConfig:
    """Test load_config."""

    def test_load(self, fixtures_dir: Path) -> None:
        """Test loading the fixture config."""
        config = load_config(fixtures_dir / "custom_config.yaml")
        assert isinstance(config, GanttBarsConfig)
        assert config.chart.default_class == "bar-dashed"
        assert config.chart.default_duration == "1d"
        assert config.chart.reference_date == date(2025, 3, 1)

    def test_missing_chart_section(self, tmp_path: Path) -> None:
        """Test a file without a chart section gets defaults."""
        path = tmp_path / "config.yaml"
        path.write_text("other: 1\n", encoding="utf-8")
        assert load_config(path).chart == ChartConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file is rejected."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError, match="Empty configuration file"):
            load_config(path)

    def test_invalid_values(self, tmp_path: Path) -> None:
        """Test invalid values are reported as ValueError."""
        path = tmp_path / "bad.yaml"
        path.write_text("chart:\n  strict: maybe\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)
