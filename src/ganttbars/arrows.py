"""Dependency arrow resolution and the arrow-to-bar index.

A task-level dependency "B depends on A" is drawn from the *last* bar of A to
the *first* bar of B, where first and last follow declaration order (sibling
index), not start times. Bar-level dependencies are drawn into the declaring bar.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .logger import get_logger
from .models import (
    BAR_REFERENCE_SEPARATOR,
    Arrow,
    ArrowKind,
    Bar,
    Diagnostic,
    DiagnosticKind,
    Task,
)

logger = get_logger()


class BarLookup:
    """Bars grouped by owning task index, built in one pass over the bar list.

    Groups keep bar-list order, which is sibling order, so first/last lookups are
    O(1) for the rest of a resolution pass. When ``tasks`` is given, a task's
    group is found by its position in that list rather than by its ``index``
    stamp, which another chart built from the same task objects may have
    overwritten.
    """

    def __init__(self, bars: Iterable[Bar], tasks: Iterable[Task] | None = None):
        self._by_task_index: dict[int, list[Bar]] = {}
        for bar in bars:
            self._by_task_index.setdefault(bar.task_index, []).append(bar)
        self._positions: dict[int, int] | None = None
        if tasks is not None:
            self._positions = {id(task): position for position, task in enumerate(tasks)}

    def _position(self, task: Task) -> int | None:
        if self._positions is None:
            return task.index
        return self._positions.get(id(task))

    def bars_of(self, task: Task) -> list[Bar]:
        """All bars of a task in sibling order (empty if it produced none)."""
        position = self._position(task)
        if position is None:
            return []
        return self._by_task_index.get(position, [])

    def first(self, task: Task) -> Bar | None:
        """Bar with the lowest sibling index - the anchor for incoming arrows."""
        bars = self.bars_of(task)
        return bars[0] if bars else None

    def last(self, task: Task) -> Bar | None:
        """Bar with the highest sibling index - the anchor for outgoing arrows."""
        bars = self.bars_of(task)
        return bars[-1] if bars else None

    def find(self, task: Task, bar_id: str) -> Bar | None:
        """Bar of a task by its declared bar id."""
        for bar in self.bars_of(task):
            if bar.id == bar_id:
                return bar
        return None


@dataclass(slots=True)
class ArrowResolution:
    """Arrows produced for a bar list and the dependencies that were skipped."""

    arrows: list[Arrow] = field(default_factory=list[Arrow])
    diagnostics: list[Diagnostic] = field(default_factory=list[Diagnostic])

    def skip(self, diagnostic: Diagnostic) -> None:
        logger.checks(f"  Skipped dependency: {diagnostic.message}")
        self.diagnostics.append(diagnostic)


def build_task_table(tasks: Iterable[Task]) -> dict[str, Task]:
    """Map task ids to tasks. The first task wins if an id repeats."""
    table: dict[str, Task] = {}
    for task in tasks:
        table.setdefault(task.id, task)
    return table


def _resolve_task_dependencies(
    task: Task,
    tasks_by_id: dict[str, Task],
    lookup: BarLookup,
    result: ArrowResolution,
) -> None:
    for dep_id in task.dependencies:
        if dep_id == task.id:
            result.skip(
                Diagnostic(
                    DiagnosticKind.SELF_REFERENCE,
                    task.id,
                    dep_id,
                    f"Task '{task.id}' depends on itself",
                )
            )
            continue

        predecessor = tasks_by_id.get(dep_id)
        if predecessor is None:
            result.skip(
                Diagnostic(
                    DiagnosticKind.MISSING_TASK,
                    task.id,
                    dep_id,
                    f"Task '{task.id}' depends on unknown task '{dep_id}'",
                )
            )
            continue

        source = lookup.last(predecessor)
        target = lookup.first(task)
        if source is None or target is None:
            empty = predecessor.id if source is None else task.id
            result.skip(
                Diagnostic(
                    DiagnosticKind.NO_BAR,
                    task.id,
                    dep_id,
                    f"Dependency '{dep_id}' -> '{task.id}' has no bar to anchor on "
                    f"(task '{empty}' has no bars)",
                )
            )
            continue

        arrow = Arrow(source_bar=source, target_bar=target)
        logger.changes(f"  Arrow {arrow.label}")
        result.arrows.append(arrow)


def _resolve_bar_dependency(
    bar: Bar,
    reference: str,
    tasks_by_id: dict[str, Task],
    lookup: BarLookup,
) -> Bar | Diagnostic:
    """Find the source bar for one bar-level reference ("task" or "task:bar")."""
    task_id, bar_id = reference, None
    if reference not in tasks_by_id and BAR_REFERENCE_SEPARATOR in reference:
        task_id, bar_id = reference.split(BAR_REFERENCE_SEPARATOR, 1)

    predecessor = tasks_by_id.get(task_id)
    if predecessor is None:
        return Diagnostic(
            DiagnosticKind.MISSING_TASK,
            bar.task_id,
            reference,
            f"Bar '{bar.id}' of task '{bar.task_id}' depends on unknown task '{task_id}'",
            bar_id=bar.id,
        )

    if not lookup.bars_of(predecessor):
        return Diagnostic(
            DiagnosticKind.NO_BAR,
            bar.task_id,
            reference,
            f"Bar '{bar.id}' of task '{bar.task_id}' depends on '{reference}', "
            f"but task '{task_id}' has no bars",
            bar_id=bar.id,
        )

    source = lookup.last(predecessor) if bar_id is None else lookup.find(predecessor, bar_id)
    if source is None:
        return Diagnostic(
            DiagnosticKind.MISSING_BAR,
            bar.task_id,
            reference,
            f"Bar '{bar.id}' of task '{bar.task_id}' depends on unknown bar '{reference}'",
            bar_id=bar.id,
        )

    if source.key == bar.key:
        return Diagnostic(
            DiagnosticKind.SELF_REFERENCE,
            bar.task_id,
            reference,
            f"Bar '{bar.id}' of task '{bar.task_id}' depends on itself",
            bar_id=bar.id,
        )
    return source


def resolve_arrows(
    tasks: Sequence[Task],
    bars: Sequence[Bar],
    *,
    tasks_by_id: dict[str, Task] | None = None,
) -> ArrowResolution:
    """Create one arrow per resolvable dependency.

    Arrows follow task order, then each task's dependency declaration order,
    then bar-level dependencies in bar order. Duplicated dependencies give
    duplicated arrows. Unresolvable dependencies never raise; each one is
    recorded as a Diagnostic.

    Args:
        tasks: Ingested tasks in chart order
        bars: Bar list produced from those tasks
        tasks_by_id: Optional prebuilt id -> task table

    Returns:
        ArrowResolution with arrows and diagnostics
    """
    if tasks_by_id is None:
        tasks_by_id = build_task_table(tasks)
    lookup = BarLookup(bars, tasks)
    result = ArrowResolution()

    for task in tasks:
        _resolve_task_dependencies(task, tasks_by_id, lookup, result)

        for bar in lookup.bars_of(task):
            for reference in bar.dependencies:
                resolved = _resolve_bar_dependency(bar, reference, tasks_by_id, lookup)
                if isinstance(resolved, Diagnostic):
                    result.skip(resolved)
                    continue
                arrow = Arrow(source_bar=resolved, target_bar=bar, kind=ArrowKind.BAR)
                logger.changes(f"  Arrow {arrow.label} (bar-level)")
                result.arrows.append(arrow)

    logger.changes(
        f"Resolved {len(result.arrows)} arrows ({len(result.diagnostics)} dependencies skipped)"
    )
    return result


def index_arrows(arrows: Iterable[Arrow]) -> dict[str, list[Arrow]]:
    """Map each task id to the arrows touching it, in arrow-list order.

    An arrow whose ends belong to the same task is listed once for that task.
    """
    by_task: dict[str, list[Arrow]] = {}
    for arrow in arrows:
        by_task.setdefault(arrow.source_task_id, []).append(arrow)
        if arrow.target_task_id != arrow.source_task_id:
            by_task.setdefault(arrow.target_task_id, []).append(arrow)
    return by_task


def assign_arrows(bars: Iterable[Bar], arrows: Sequence[Arrow]) -> dict[str, list[Arrow]]:
    """Set ``arrows`` on every bar to the arrows touching the bar's task.

    All bars of one task get equal lists, so hovering any of them highlights
    the same arrows.

    Returns:
        The task id -> arrows index used for the assignment
    """
    by_task = index_arrows(arrows)
    for bar in bars:
        bar.arrows = list(by_task.get(bar.task_id, []))
    return by_task
