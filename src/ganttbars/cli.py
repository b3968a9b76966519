"""Command-line interface for ganttbars."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from . import context
from .chart import RenderResult
from .exceptions import GanttBarsError
from .loader import load_chart
from .logger import changes_enabled, debug_enabled, setup_logger

app = typer.Typer(
    name="ganttbars",
    help="Expand multi-bar timeline tasks into bars and dependency arrows",
    add_completion=False,
)

TIME_FORMAT = "%Y-%m-%d %H:%M"


class OutputFormat(Enum):
    """Output formats for listing commands."""

    TABLE = "table"
    JSON = "json"


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: ganttbars_config.yaml)",
        ),
    ] = None,
    strict: Annotated[
        bool | None,
        typer.Option(
            "--strict/--no-strict",
            help="Fail on the first task that cannot be expanded (overrides config)",
        ),
    ] = None,
) -> None:
    """Global options for ganttbars commands."""
    setup_logger(verbose)
    context.set_config_path(config)
    context.set_strict_override(strict)


def _render(file: Path) -> RenderResult:
    """Load and render a task file, turning library errors into a CLI exit."""
    try:
        _, chart = load_chart(file)
        return chart.render(strict=context.get_strict_override())
    except (GanttBarsError, ValueError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def _write_output(content: str, output: Path | None) -> None:
    if output:
        output.write_text(content + "\n", encoding="utf-8")
        typer.echo(f"Output written to {output}")
    else:
        typer.echo(content)


def _format_bars_table(result: RenderResult) -> str:
    lines = [f"{'TASK':<16} {'#':>2} {'BAR':<16} {'START':<16} {'END':<16} {'%':>5} CLASS"]
    for bar in result.bars:
        lines.append(
            f"{bar.task_id:<16} {bar.sibling_index:>2} {bar.id:<16} "
            f"{bar.start.strftime(TIME_FORMAT):<16} {bar.end.strftime(TIME_FORMAT):<16} "
            f"{bar.progress:>5.0f} {bar.display_class}"
        )
    return "\n".join(lines)


def _format_arrows_table(result: RenderResult) -> str:
    lines = [f"{'SOURCE':<24} {'TARGET':<24} KIND"]
    for arrow in result.arrows:
        source = f"{arrow.source_task_id}/{arrow.source_bar.id}"
        target = f"{arrow.target_task_id}/{arrow.target_bar.id}"
        lines.append(f"{source:<24} {target:<24} {arrow.kind.value}")
    return "\n".join(lines)


@app.command()
def bars(
    file: Annotated[Path, typer.Argument(help="Path to the task file")] = Path("tasks.yaml"),
    *,
    output_format: Annotated[
        OutputFormat, typer.Option("--format", "-f", help="Output format")
    ] = OutputFormat.TABLE,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """List the bars each task expands into."""
    result = _render(file)
    if output_format == OutputFormat.JSON:
        content = json.dumps([bar.to_dict() for bar in result.bars], indent=2)
    else:
        content = _format_bars_table(result)
    _write_output(content, output)
    for error in result.errors:
        typer.echo(f"Warning: {error}", err=True)


@app.command()
def arrows(
    file: Annotated[Path, typer.Argument(help="Path to the task file")] = Path("tasks.yaml"),
    *,
    output_format: Annotated[
        OutputFormat, typer.Option("--format", "-f", help="Output format")
    ] = OutputFormat.TABLE,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """List the dependency arrows between bars."""
    result = _render(file)
    if output_format == OutputFormat.JSON:
        content = json.dumps([arrow.to_dict() for arrow in result.arrows], indent=2)
    else:
        content = _format_arrows_table(result)
    _write_output(content, output)


def _print_task_breakdown(result: RenderResult) -> None:
    for task_id in result.task_ids:
        task_bars = result.bars_for_task(task_id)
        typer.echo(
            f"  {task_id}: {len(task_bars)} bar(s), "
            f"{len(result.arrows_for_task(task_id))} arrow(s)"
        )
        if debug_enabled():
            for bar in task_bars:
                typer.echo(
                    f"    [{bar.sibling_index}] {bar.id} "
                    f"{bar.start.strftime(TIME_FORMAT)} - {bar.end.strftime(TIME_FORMAT)}"
                )


@app.command()
def check(
    file: Annotated[Path, typer.Argument(help="Path to the task file")] = Path("tasks.yaml"),
) -> None:
    """Report tasks that cannot be expanded and dependencies that draw no arrow.

    With -v, also lists bar and arrow counts per task; -v 3 adds each bar's span.
    """
    result = _render(file)

    for error in result.errors:
        typer.echo(f"ERROR: {error}")
    for diagnostic in result.diagnostics:
        typer.echo(f"SKIPPED ({diagnostic.kind.value}): {diagnostic.message}")
    if changes_enabled():
        _print_task_breakdown(result)

    typer.echo(
        f"{len(result.bars)} bars, {len(result.arrows)} arrows, "
        f"{len(result.errors)} errors, {len(result.diagnostics)} skipped dependencies"
    )
    if result.errors:
        raise typer.Exit(1)


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
