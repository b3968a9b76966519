"""Pytest configuration and fixtures for ganttbars tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from pathlib import Path

import pytest

from ganttbars import context
from ganttbars.config import ChartConfig
from ganttbars.dates import IsoDateResolver
from ganttbars.logger import reset_logger
from ganttbars.models import BarSpec, Task

REFERENCE_DATE = date(2025, 1, 1)


@pytest.fixture(autouse=True)
def clean_logger() -> Iterator[None]:
    """Reset the ganttbars logger around every test."""
    reset_logger()
    yield
    reset_logger()


@pytest.fixture(autouse=True)
def clean_context() -> Iterator[None]:
    """Clear CLI options left behind by earlier tests."""
    context.set_config_path(None)
    context.set_strict_override(None)
    yield
    context.set_config_path(None)
    context.set_strict_override(None)


@pytest.fixture
def fixtures_dir() -> Path:
    """Get the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def resolver() -> IsoDateResolver:
    """Resolver with a fixed reference date for dateless tasks."""
    return IsoDateResolver(REFERENCE_DATE)


@pytest.fixture
def chart_config() -> ChartConfig:
    """Chart config with a fixed reference date."""
    return ChartConfig(reference_date=REFERENCE_DATE)


@pytest.fixture
def split_task() -> Task:
    """Task A from the two-segment morning/afternoon example."""
    return Task(
        id="A",
        name="Split work",
        bars=[
            BarSpec(id="a1", start="2025-01-01 08:00", duration="1h"),
            BarSpec(id="a2", start="2025-01-01 14:00", duration="1h"),
        ],
    )
