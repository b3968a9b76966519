"""Chart pipeline: task ingestion, bar expansion, arrow resolution and indexing."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .arrows import assign_arrows, build_task_table, resolve_arrows
from .config import ChartConfig
from .dates import DateResolver, IsoDateResolver
from .exceptions import ConfigurationError
from .expander import expand_bars, ingest_tasks
from .logger import get_logger
from .models import Arrow, Bar, BarKey, Diagnostic, Task

logger = get_logger()


@dataclass(slots=True)
class RenderResult:
    """Output of one render cycle, handed to the rendering layer."""

    bars: list[Bar] = field(default_factory=list[Bar])
    arrows: list[Arrow] = field(default_factory=list[Arrow])
    diagnostics: list[Diagnostic] = field(default_factory=list[Diagnostic])
    errors: list[ConfigurationError] = field(default_factory=list[ConfigurationError])
    tasks_by_id: dict[str, Task] = field(default_factory=dict[str, Task], repr=False)
    arrows_by_task: dict[str, list[Arrow]] = field(
        default_factory=dict[str, list[Arrow]], repr=False
    )
    _bars_by_key: dict[BarKey, Bar] = field(init=False, repr=False, compare=False)
    _bars_by_task: dict[str, list[Bar]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._bars_by_key = {}
        self._bars_by_task = {}
        for bar in self.bars:
            self._bars_by_key.setdefault(bar.key, bar)
            self._bars_by_task.setdefault(bar.task_id, []).append(bar)

    @property
    def ok(self) -> bool:
        """Whether every task expanded without a configuration error."""
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise the first configuration error of the cycle, if any."""
        if self.errors:
            raise self.errors[0]

    def owning_task(self, bar: Bar) -> Task:
        """Resolve the task a bar belongs to."""
        return self.tasks_by_id[bar.task_id]

    def bars_for_task(self, task_id: str) -> list[Bar]:
        """All bars of a task in sibling order."""
        return list(self._bars_by_task.get(task_id, []))

    def related_bars(self, bar: Bar) -> list[Bar]:
        """Bars highlighted together with ``bar``: every bar of its task."""
        return self.bars_for_task(bar.task_id)

    @property
    def task_ids(self) -> list[str]:
        """Ids of the tasks that produced bars, in bar order."""
        return list(self._bars_by_task)

    def arrows_for_task(self, task_id: str) -> list[Arrow]:
        """Arrows touching any bar of a task."""
        return list(self.arrows_by_task.get(task_id, []))

    def get_bar(self, key: BarKey) -> Bar | None:
        """Look up a bar by its (task id, sibling index) key."""
        return self._bars_by_key.get(key)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dictionary."""
        return {
            "bars": [bar.to_dict() for bar in self.bars],
            "arrows": [arrow.to_dict() for arrow in self.arrows],
            "diagnostics": [
                {
                    "kind": d.kind.value,
                    "task_id": d.task_id,
                    "bar_id": d.bar_id,
                    "dependency": d.dependency,
                    "message": d.message,
                }
                for d in self.diagnostics
            ],
            "errors": [
                {"task_id": e.task_id, "bar_id": e.bar_id, "message": str(e)}
                for e in self.errors
            ],
        }


class Chart:
    """A task list and the settings needed to turn it into bars and arrows.

    Tasks are ingested once, when the chart is created. Each call to render()
    is one render cycle: bars and arrows are rebuilt from scratch and nothing
    from a previous cycle is reused. Interactions that change tasks must call
    render() again; callers must not replace the task list mid-render.
    """

    def __init__(
        self,
        tasks: Iterable[Task],
        *,
        resolver: DateResolver | None = None,
        config: ChartConfig | None = None,
    ):
        """Initialize the chart and ingest its tasks.

        Args:
            tasks: Tasks in row order
            resolver: Date/duration resolver. Defaults to IsoDateResolver using
                      config.reference_date for dateless tasks.
            config: Chart defaults and policies

        Raises:
            IdentityCollisionError: If config.check_identity is set and an id repeats
        """
        self.config = config or ChartConfig()
        self.resolver = resolver or IsoDateResolver(self.config.reference_date)
        self.tasks = ingest_tasks(tasks, check_identity=self.config.check_identity)
        self.tasks_by_id = build_task_table(self.tasks)

    def get_task(self, task_id: str) -> Task | None:
        """Get a task by its ID."""
        return self.tasks_by_id.get(task_id)

    def owning_task(self, bar: Bar) -> Task:
        """Resolve the task a bar belongs to."""
        return self.tasks[bar.task_index]

    def render(self, *, strict: bool | None = None) -> RenderResult:
        """Run one full render cycle.

        Args:
            strict: Raise on the first configuration error instead of returning a
                    partial result. Defaults to config.strict.

        Returns:
            RenderResult with bars (arrows assigned), arrows, diagnostics and errors

        Raises:
            ConfigurationError: In strict mode, if any task fails to expand
        """
        strict = self.config.strict if strict is None else strict

        expansion = expand_bars(
            self.tasks,
            self.resolver,
            default_class=self.config.default_class,
            default_duration=self.config.default_duration,
        )
        if strict and expansion.errors:
            raise expansion.errors[0]

        resolution = resolve_arrows(self.tasks, expansion.bars, tasks_by_id=self.tasks_by_id)
        arrows_by_task = assign_arrows(expansion.bars, resolution.arrows)

        logger.changes(
            f"Rendered {len(self.tasks)} tasks: {len(expansion.bars)} bars, "
            f"{len(resolution.arrows)} arrows"
        )
        return RenderResult(
            bars=expansion.bars,
            arrows=resolution.arrows,
            diagnostics=resolution.diagnostics,
            errors=expansion.errors,
            tasks_by_id=self.tasks_by_id,
            arrows_by_task=arrows_by_task,
        )


def render_tasks(
    tasks: Iterable[Task],
    *,
    resolver: DateResolver | None = None,
    config: ChartConfig | None = None,
) -> RenderResult:
    """Ingest tasks and run a single render cycle."""
    return Chart(tasks, resolver=resolver, config=config).render()
