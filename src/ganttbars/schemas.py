"""Pydantic schemas for task file validation."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import split_dependency_string


def _coerce_dependencies(v: Any) -> list[str]:
    if v is None:
        return []
    if isinstance(v, str):
        return split_dependency_string(v)
    if isinstance(v, list):
        return [str(item).strip() for item in v if str(item).strip()]  # type: ignore[misc]
    return [str(v)]


def _coerce_instant(v: Any) -> str | None:
    """YAML turns unquoted dates into date/datetime objects; keep them as ISO strings."""
    if v is None:
        return None
    if isinstance(v, datetime | date):
        return v.isoformat()
    return str(v)


class BarSpecSchema(BaseModel):
    """Schema for one entry of a task's ``bars`` list."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    # Required for expansion; absence is reported per task by the expander
    start: str | None = None
    duration: str | None = None
    progress: float | None = Field(default=None, ge=0, le=100)
    style_class: str | None = Field(default=None, alias="class")
    dependencies: list[str] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """Accept numeric ids."""
        return str(v)

    @field_validator("start", "duration", mode="before")
    @classmethod
    def coerce_instant(cls, v: Any) -> str | None:
        """Convert date objects and numbers to strings."""
        return _coerce_instant(v)

    @field_validator("dependencies", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Accept a list or a comma-separated string."""
        return _coerce_dependencies(v)


class TaskSchema(BaseModel):
    """Schema for one task."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    start: str | None = None
    duration: str | None = None
    progress: float | None = Field(default=None, ge=0, le=100)
    style_class: str | None = Field(default=None, alias="class")
    dependencies: list[str] = Field(default_factory=list)
    bars: list[BarSpecSchema] | None = None

    @field_validator("id", "name", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Accept numeric ids and names."""
        return "" if v is None else str(v)

    @field_validator("start", "duration", mode="before")
    @classmethod
    def coerce_instant(cls, v: Any) -> str | None:
        """Convert date objects and numbers to strings."""
        return _coerce_instant(v)

    @field_validator("dependencies", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Accept a list or a comma-separated string."""
        return _coerce_dependencies(v)


class MetadataSchema(BaseModel):
    """Schema for task file metadata."""

    version: str = "1.0"
    title: str | None = None

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version_to_string(cls, v: Any) -> str:
        """Ensure version is a string."""
        return str(v)


class ChartFileSchema(BaseModel):
    """Schema for the whole task file."""

    metadata: MetadataSchema = Field(default_factory=MetadataSchema)
    tasks: list[TaskSchema] = Field(default_factory=list)
