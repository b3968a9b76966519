"""YAML parser for ganttbars task files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .models import BarSpec, ChartDocument, ChartMetadata, Task
from .schemas import BarSpecSchema, ChartFileSchema, TaskSchema


def _to_bar_spec(schema: BarSpecSchema) -> BarSpec:
    return BarSpec(
        id=schema.id,
        start=schema.start,
        duration=schema.duration,
        progress=schema.progress,
        style_class=schema.style_class,
        dependencies=list(schema.dependencies),
    )


def _to_task(schema: TaskSchema) -> Task:
    return Task(
        id=schema.id,
        name=schema.name,
        start=schema.start,
        duration=schema.duration,
        progress=schema.progress,
        style_class=schema.style_class,
        dependencies=list(schema.dependencies),
        bars=[_to_bar_spec(bar) for bar in schema.bars] if schema.bars is not None else None,
    )


class ChartParser:
    """Parser for task files.

    Only handles reading and schema validation. Ingestion and rendering happen in
    ganttbars.chart; use load_chart() from ganttbars.loader for the full pipeline.
    """

    def parse_file(self, file_path: Path | str) -> ChartDocument:
        """Parse a YAML (or JSON) task file into a ChartDocument."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ParseError("Task file must contain a dictionary at the root level")

        return self.parse_data(data)  # type: ignore[arg-type]

    def parse_data(self, data: dict[str, Any]) -> ChartDocument:
        """Parse already-loaded data into a ChartDocument."""
        try:
            schema = ChartFileSchema.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid task file structure: {e}") from e

        metadata = ChartMetadata(version=schema.metadata.version, title=schema.metadata.title)
        return ChartDocument(metadata=metadata, tasks=[_to_task(task) for task in schema.tasks])
