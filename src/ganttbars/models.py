"""Data models for ganttbars."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

# (task id, sibling index) - the stable identity of a bar within one chart
BarKey = tuple[str, int]

# Separator for bar-qualified references in bar-level dependencies ("task:bar")
BAR_REFERENCE_SEPARATOR = ":"


def _default_str_list() -> list[str]:
    return []


def _default_arrow_list() -> list[Arrow]:
    return []


def split_dependency_string(value: str) -> list[str]:
    """Split a comma-separated dependency string into ids.

    Empty items are dropped, so "a, ,b," gives ["a", "b"].
    """
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class BarSpec:
    """One user-declared segment of a task (an element of ``Task.bars``).

    ``start`` and ``duration`` are required for expansion; they are optional here
    so that a missing value surfaces as a ConfigurationError for the owning task
    instead of a failure to construct the spec.
    """

    id: str
    start: str | None = None
    duration: str | None = None
    progress: float | None = None
    style_class: str | None = None
    dependencies: list[str] = field(default_factory=_default_str_list)


@dataclass
class Task:
    """User-supplied logical unit of work; one row of the chart."""

    id: str
    name: str = ""
    start: str | None = None
    duration: str | None = None
    progress: float | None = None
    style_class: str | None = None
    dependencies: list[str] = field(default_factory=_default_str_list)
    bars: list[BarSpec] | None = None
    # Ordinal stamped at ingestion; the internal identity used instead of id searches
    index: int | None = field(default=None, compare=False)

    @property
    def has_bars(self) -> bool:
        """Whether the task is drawn from its bar specs (a non-empty ``bars`` list)."""
        return bool(self.bars)

    def get_bar_spec(self, bar_id: str) -> BarSpec | None:
        """Get a bar spec by its id."""
        for spec in self.bars or []:
            if spec.id == bar_id:
                return spec
        return None


@dataclass(slots=True)
class Bar:
    """A renderable time-bounded segment of a task.

    Bars do not point at their task. ``task_id``/``task_index`` name it and the
    chart's task table resolves it, so bars stay plain copyable values.
    """

    task_id: str
    task_index: int
    sibling_index: int
    id: str
    name: str
    start: datetime
    end: datetime
    progress: float = 0.0
    display_class: str = ""
    dependencies: list[str] = field(default_factory=_default_str_list)
    arrows: list[Arrow] = field(default_factory=_default_arrow_list, repr=False, compare=False)

    @property
    def key(self) -> BarKey:
        """The (task id, sibling index) identity pair."""
        return (self.task_id, self.sibling_index)

    @property
    def is_first(self) -> bool:
        """Whether this is the first bar of its task."""
        return self.sibling_index == 0

    @property
    def duration_seconds(self) -> float:
        """Length of the bar in seconds."""
        return (self.end - self.start).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dictionary for the rendering layer."""
        return {
            "task_id": self.task_id,
            "sibling_index": self.sibling_index,
            "id": self.id,
            "name": self.name,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "progress": self.progress,
            "class": self.display_class,
            "dependencies": list(self.dependencies),
            "arrows": [arrow.label for arrow in self.arrows],
        }


class ArrowKind(Enum):
    """Where the dependency that produced an arrow was declared."""

    TASK = "task"  # Task.dependencies: last bar of predecessor -> first bar of task
    BAR = "bar"  # BarSpec.dependencies: predecessor bar -> the declaring bar


@dataclass(frozen=True)
class Arrow:
    """Directed dependency edge between two concrete bars.

    Hashes by its bar keys and kind, so arrows can be collected into sets even
    though bars themselves are mutable.
    """

    source_bar: Bar
    target_bar: Bar
    kind: ArrowKind = ArrowKind.TASK

    def __hash__(self) -> int:
        return hash((self.key, self.kind))

    @property
    def source_task_id(self) -> str:
        return self.source_bar.task_id

    @property
    def target_task_id(self) -> str:
        return self.target_bar.task_id

    @property
    def key(self) -> tuple[BarKey, BarKey]:
        """Identity of the arrow as its (source key, target key) pair."""
        return (self.source_bar.key, self.target_bar.key)

    @property
    def label(self) -> str:
        """Human-readable form, e.g. ``A[1] -> B[0]``."""
        source_id, source_index = self.source_bar.key
        target_id, target_index = self.target_bar.key
        return f"{source_id}[{source_index}] -> {target_id}[{target_index}]"

    def touches_task(self, task_id: str) -> bool:
        """Whether either end of the arrow belongs to the given task."""
        return task_id in (self.source_task_id, self.target_task_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dictionary for the rendering layer."""
        return {
            "source": {"task_id": self.source_task_id, "bar_id": self.source_bar.id},
            "target": {"task_id": self.target_task_id, "bar_id": self.target_bar.id},
            "source_sibling_index": self.source_bar.sibling_index,
            "target_sibling_index": self.target_bar.sibling_index,
            "kind": self.kind.value,
        }


class DiagnosticKind(Enum):
    """Reasons a declared dependency produced no arrow."""

    MISSING_TASK = "missing_task"  # dependency id matches no task
    MISSING_BAR = "missing_bar"  # "task:bar" reference names no bar of that task
    NO_BAR = "no_bar"  # one side has no bars (e.g. its expansion failed)
    SELF_REFERENCE = "self_reference"  # task lists itself as a dependency


@dataclass(slots=True, frozen=True)
class Diagnostic:
    """A dependency that was skipped without failing the render."""

    kind: DiagnosticKind
    task_id: str
    dependency: str
    message: str
    bar_id: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass
class ChartMetadata:
    """Metadata for a task file."""

    version: str = "1.0"
    title: str | None = None


@dataclass
class ChartDocument:
    """A parsed task file: metadata plus the ordered task list."""

    metadata: ChartMetadata
    tasks: list[Task]

    def get_all_ids(self) -> set[str]:
        """Get all task IDs in the document."""
        return {task.id for task in self.tasks}

    def get_task_by_id(self, task_id: str) -> Task | None:
        """Get a task by its ID."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None
