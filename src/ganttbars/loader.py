"""Task file loading with config discovery."""

from __future__ import annotations

from pathlib import Path

from . import context
from .chart import Chart
from .config import DEFAULT_CONFIG_FILENAME, GanttBarsConfig, load_config
from .dates import DateResolver
from .models import ChartDocument
from .parser import ChartParser


def discover_config(
    chart_path: Path,
    config_path: Path | None = None,
) -> GanttBarsConfig | None:
    """Discover configuration from various locations.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. Task file directory / ganttbars_config.yaml
    4. Current directory / ganttbars_config.yaml
    """
    if config_path and config_path.exists():
        return load_config(config_path)

    ctx_config = context.get_config_path()
    if ctx_config and ctx_config.exists():
        return load_config(ctx_config)

    dir_config = Path(chart_path).parent / DEFAULT_CONFIG_FILENAME
    if dir_config.exists():
        return load_config(dir_config)

    cwd_config = Path(DEFAULT_CONFIG_FILENAME)
    if cwd_config.exists():
        return load_config(cwd_config)

    return None


def load_document(path: Path | str) -> ChartDocument:
    """Parse a task file without building a chart."""
    return ChartParser().parse_file(path)


def load_chart(
    path: Path | str,
    config_path: Path | None = None,
    *,
    config: GanttBarsConfig | None = None,
    resolver: DateResolver | None = None,
) -> tuple[ChartDocument, Chart]:
    """Load a task file and ingest it into a Chart.

    Args:
        path: Path to the task file
        config_path: Optional explicit path to a config file
        config: Optional explicit configuration (overrides discovery)
        resolver: Optional date/duration resolver

    Returns:
        The parsed document and the chart built from its tasks
    """
    path = Path(path)
    if config is None:
        config = discover_config(path, config_path) or GanttBarsConfig()

    document = load_document(path)
    chart = Chart(document.tasks, resolver=resolver, config=config.chart)
    return document, chart
