"""Configuration loading for ganttbars.

A single YAML file (ganttbars_config.yaml) holds the chart defaults used by the
bar expansion and arrow resolution pipeline.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .dates import DURATION_PATTERN
from .expander import DEFAULT_DURATION
from .styling import DEFAULT_CLASS

DEFAULT_CONFIG_FILENAME = "ganttbars_config.yaml"


class ChartConfig(BaseModel):
    """Defaults and policies for building a chart."""

    default_class: str = DEFAULT_CLASS  # Display class when neither bar nor task names one
    default_duration: str = DEFAULT_DURATION  # Duration for bar-less tasks that declare none
    reference_date: date | None = None  # Start for bar-less tasks without one (default: today)
    check_identity: bool = True  # Reject duplicate task ids / bar ids at ingestion
    strict: bool = False  # Raise on the first configuration error instead of a partial chart

    @field_validator("default_duration")
    @classmethod
    def check_duration(cls, v: str) -> str:
        """Ensure the default duration is a valid duration token."""
        if not DURATION_PATTERN.match(v):
            raise ValueError(
                f"Invalid chart.default_duration: '{v}'. "
                "Expected <integer><unit> with unit m, h or d"
            )
        return v

    @field_validator("default_class")
    @classmethod
    def check_class(cls, v: str) -> str:
        """Ensure the default class is not blank."""
        if not v.strip():
            raise ValueError("chart.default_class must not be empty")
        return v


class GanttBarsConfig(BaseModel):
    """Top-level configuration file contents."""

    chart: ChartConfig = Field(default_factory=ChartConfig)


def load_config(config_path: Path | str) -> GanttBarsConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to ganttbars_config.yaml

    Returns:
        The validated configuration

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config is empty or invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        try:
            data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    if not data:
        raise ValueError("Empty configuration file")
    if not isinstance(data, dict):
        raise ValueError("Configuration must be a mapping at the root level")

    try:
        return GanttBarsConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}") from e
