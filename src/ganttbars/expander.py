"""Task ingestion and bar expansion.

Ingestion stamps each task with its ordinal and checks id uniqueness. Expansion
turns every task into one or more bars: one per bar spec, or a single bar built
from the task itself when it declares no bars.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from .dates import DateResolver, IsoDateResolver
from .exceptions import ConfigurationError, DateParseError, IdentityCollisionError
from .logger import get_logger
from .models import Bar, BarSpec, Task
from .styling import DEFAULT_CLASS, is_recognized_class, resolve_display_class

logger = get_logger()

DEFAULT_DURATION = "2d"
PROGRESS_MIN = 0.0
PROGRESS_MAX = 100.0


@dataclass(slots=True, frozen=True)
class MergedBarFields:
    """Field values for one bar after applying the bar-spec/task merge policy."""

    id: str
    name: str
    start: str
    duration: str
    progress: float
    display_class: str
    dependencies: list[str]


@dataclass(slots=True)
class ExpansionResult:
    """Bars produced from a task list, plus the tasks that failed to expand."""

    bars: list[Bar] = field(default_factory=list[Bar])
    errors: list[ConfigurationError] = field(default_factory=list[ConfigurationError])


def ingest_tasks(tasks: Iterable[Task], *, check_identity: bool = True) -> list[Task]:
    """Stamp every task with its position and optionally check id uniqueness.

    The whole list is checked before any task is stamped, so a collision
    leaves the tasks as they were.

    Args:
        tasks: Tasks in chart order
        check_identity: Raise on duplicate task ids or duplicate bar ids within a task

    Returns:
        The tasks as a list, each with ``index`` set

    Raises:
        IdentityCollisionError: If check_identity is set and an id repeats
    """
    ingested = list(tasks)
    if check_identity:
        seen: dict[str, int] = {}
        for position, task in enumerate(ingested):
            if task.id in seen:
                raise IdentityCollisionError(
                    f"Duplicate task id '{task.id}' at positions {seen[task.id]} and {position}",
                    task_id=task.id,
                )
            _check_bar_ids(task)
            seen[task.id] = position

    for position, task in enumerate(ingested):
        task.index = position
    logger.debug(f"Ingested {len(ingested)} tasks")
    return ingested


def _check_bar_ids(task: Task) -> None:
    bar_ids: set[str] = set()
    for spec in task.bars or []:
        if spec.id in bar_ids:
            raise IdentityCollisionError(
                f"Task '{task.id}' declares bar id '{spec.id}' more than once",
                task_id=task.id,
                bar_id=spec.id,
            )
        bar_ids.add(spec.id)


def _check_progress(value: float, task: Task, bar_id: str | None = None) -> float:
    progress = float(value)
    if not PROGRESS_MIN <= progress <= PROGRESS_MAX:
        where = f"Bar '{bar_id}' of task '{task.id}'" if bar_id else f"Task '{task.id}'"
        raise ConfigurationError(
            f"{where} has progress {value}; must be between 0 and 100",
            task_id=task.id,
            bar_id=bar_id,
        )
    return progress


def merge_bar_fields(
    task: Task, spec: BarSpec, default_class: str = DEFAULT_CLASS
) -> MergedBarFields:
    """Merge a bar spec with its task.

    start, duration, id and dependencies come from the spec only; start and
    duration are required. progress and class fall back to the task, then to
    defaults. name always comes from the task.

    Raises:
        ConfigurationError: If the spec lacks start or duration, or progress is out of range
    """
    missing = [name for name in ("start", "duration") if not getattr(spec, name)]
    if missing:
        raise ConfigurationError(
            f"Bar '{spec.id}' of task '{task.id}' is missing {' and '.join(missing)}",
            task_id=task.id,
            bar_id=spec.id,
        )
    assert spec.start is not None and spec.duration is not None

    if spec.progress is not None:
        progress = _check_progress(spec.progress, task, spec.id)
    elif task.progress is not None:
        progress = _check_progress(task.progress, task)
    else:
        progress = PROGRESS_MIN

    return MergedBarFields(
        id=spec.id,
        name=task.name,
        start=spec.start,
        duration=spec.duration,
        progress=progress,
        display_class=resolve_display_class(spec.style_class, task.style_class, default_class),
        dependencies=list(spec.dependencies),
    )


def _resolve_span(
    resolver: DateResolver, task: Task, start: str, duration: str, bar_id: str | None = None
) -> tuple[datetime, datetime]:
    try:
        return resolver.resolve(start, duration)
    except DateParseError as e:
        where = f"Bar '{bar_id}' of task '{task.id}'" if bar_id else f"Task '{task.id}'"
        raise ConfigurationError(f"{where}: {e}", task_id=task.id, bar_id=bar_id) from e


def _make_bar(
    task: Task,
    task_index: int,
    sibling_index: int,
    merged: MergedBarFields,
    span: tuple[datetime, datetime],
) -> Bar:
    start, end = span
    if not is_recognized_class(merged.display_class):
        logger.checks(
            f"  Bar {task.id}[{sibling_index}] uses custom class '{merged.display_class}'"
        )
    return Bar(
        task_id=task.id,
        task_index=task_index,
        sibling_index=sibling_index,
        id=merged.id,
        name=merged.name,
        start=start,
        end=end,
        progress=merged.progress,
        display_class=merged.display_class,
        dependencies=merged.dependencies,
    )


def expand_task(
    task: Task,
    resolver: DateResolver,
    *,
    default_class: str = DEFAULT_CLASS,
    default_duration: str = DEFAULT_DURATION,
    task_index: int | None = None,
) -> list[Bar]:
    """Expand one ingested task into its bars.

    A task with a non-empty ``bars`` list gives one bar per spec, in declaration
    order, with sibling indexes 0..n-1. Otherwise the task itself is the single
    bar; a missing start uses the resolver's reference instant and a missing
    duration uses ``default_duration``.

    Bars record ``task_index`` as the task's position; it defaults to the
    task's ``index`` stamp.

    Raises:
        ConfigurationError: If any bar of the task cannot be built. No bars are
            returned for the task in that case.
    """
    position = task.index if task_index is None else task_index
    assert position is not None, f"Task '{task.id}' was not ingested"

    if task.has_bars:
        assert task.bars is not None
        bars: list[Bar] = []
        for sibling_index, spec in enumerate(task.bars):
            merged = merge_bar_fields(task, spec, default_class)
            span = _resolve_span(resolver, task, merged.start, merged.duration, spec.id)
            bars.append(_make_bar(task, position, sibling_index, merged, span))
        return bars

    progress = _check_progress(task.progress, task) if task.progress is not None else PROGRESS_MIN
    duration = task.duration or default_duration
    start = task.start or resolver.reference_instant().isoformat()
    span = _resolve_span(resolver, task, start, duration)

    merged = MergedBarFields(
        id=task.id,
        name=task.name,
        start=start,
        duration=duration,
        progress=progress,
        display_class=resolve_display_class(None, task.style_class, default_class),
        dependencies=[],
    )
    return [_make_bar(task, position, 0, merged, span)]


def expand_bars(
    tasks: Iterable[Task],
    resolver: DateResolver | None = None,
    *,
    default_class: str = DEFAULT_CLASS,
    default_duration: str = DEFAULT_DURATION,
) -> ExpansionResult:
    """Expand ingested tasks into the chart-wide bar list.

    Bars are ordered by task, then by declaration order within a task. Each
    bar's ``task_index`` is its task's position in ``tasks``. A task whose
    expansion fails contributes no bars and its error is collected; the
    remaining tasks still expand.

    Args:
        tasks: Ingested tasks in chart order
        resolver: Date/duration resolver (defaults to IsoDateResolver)
        default_class: Display class for bars and tasks that name none
        default_duration: Duration for bar-less tasks that declare none

    Returns:
        ExpansionResult with the bar list and per-task errors
    """
    resolver = resolver or IsoDateResolver()
    result = ExpansionResult()
    for position, task in enumerate(tasks):
        try:
            task_bars = expand_task(
                task,
                resolver,
                default_class=default_class,
                default_duration=default_duration,
                task_index=position,
            )
        except ConfigurationError as e:
            logger.error(f"Skipping bars of task '{task.id}': {e}")
            result.errors.append(e)
            continue
        logger.debug(f"  Task {task.id} expanded into {len(task_bars)} bar(s)")
        result.bars.extend(task_bars)
    logger.changes(f"Expanded {len(result.bars)} bars ({len(result.errors)} task(s) failed)")
    return result
