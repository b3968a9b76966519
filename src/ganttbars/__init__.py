"""Multi-bar timeline tasks: bar expansion and dependency arrow resolution."""

from ganttbars.arrows import assign_arrows, index_arrows, resolve_arrows
from ganttbars.chart import Chart, RenderResult, render_tasks
from ganttbars.config import ChartConfig, GanttBarsConfig, load_config
from ganttbars.dates import DateResolver, IsoDateResolver
from ganttbars.exceptions import (
    ConfigurationError,
    DateParseError,
    GanttBarsError,
    IdentityCollisionError,
)
from ganttbars.expander import expand_bars, ingest_tasks, merge_bar_fields
from ganttbars.models import Arrow, ArrowKind, Bar, BarSpec, Diagnostic, DiagnosticKind, Task

__all__ = [
    "Arrow",
    "ArrowKind",
    "Bar",
    "BarSpec",
    "Chart",
    "ChartConfig",
    "ConfigurationError",
    "DateParseError",
    "DateResolver",
    "Diagnostic",
    "DiagnosticKind",
    "GanttBarsConfig",
    "GanttBarsError",
    "IdentityCollisionError",
    "IsoDateResolver",
    "RenderResult",
    "Task",
    "assign_arrows",
    "expand_bars",
    "index_arrows",
    "ingest_tasks",
    "load_config",
    "merge_bar_fields",
    "render_tasks",
    "resolve_arrows",
]
