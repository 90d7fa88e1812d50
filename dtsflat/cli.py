"""dtsflat CLI - flatten nested namespaces in ambient declaration files."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from dtsflat.config import DEFAULT_IMPORT_MARKER, DEFAULT_SEPARATOR, FlattenConfig, PipelineConfig
from dtsflat.errors import DtsFlatError
from dtsflat.output import build_graph_report, write_json, write_output
from dtsflat.pipeline import run_pipeline


@click.group()
def cli() -> None:
    """dtsflat - Hoist nested namespaces to top-level declarations."""
    pass


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _run_with_progress(config: PipelineConfig):
    """Run the pipeline with Rich progress display on stderr."""
    from rich.console import Console
    from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
    from rich.table import Table

    console = Console(stderr=True)

    with Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Initialising...", total=None)

        def on_phase(name, label):
            progress.update(task, description=label)

        result = run_pipeline(config, progress_callback=on_phase)

    table = Table(title=f"dtsflat: {Path(config.input_path).name}", show_edge=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Units", str(result.stats.get("units", 0)))
    table.add_row("Max depth", str(result.stats.get("max_depth", 0)))
    table.add_row("Aliases", str(result.stats.get("aliases", 0)))
    table.add_row("Top-level statements", str(result.stats.get("top_level_statements", 0)))
    table.add_row("Placeholders", str(result.stats.get("diagnostics", 0)))
    table.add_row("Duration", f"{result.metadata.get('duration_ms', 0):.1f}ms")

    console.print(table)

    timings = result.metadata.get("phase_timings", {})
    if config.verbose and timings:
        timing_table = Table(title="Phase Timings", show_edge=False)
        timing_table.add_column("Phase", style="bold")
        timing_table.add_column("Time (ms)", justify="right")
        for phase, seconds in timings.items():
            timing_table.add_row(phase, f"{seconds * 1000:.1f}")
        console.print(timing_table)

    return result


def _non_empty(ctx: click.Context, param: click.Parameter, value: str) -> str:
    if not value:
        raise click.BadParameter("must not be empty")
    return value


def _fail(error: DtsFlatError) -> None:
    from rich.console import Console
    Console(stderr=True).print(f"[red]Error:[/red] {error}")
    sys.exit(1)


@cli.command("flatten")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", "output_path", default=None, help="Output file path (default: stdout)")
@click.option("--lenient", is_flag=True, help="Emit placeholders for unsupported shapes instead of failing")
@click.option("--import-marker", default=DEFAULT_IMPORT_MARKER, help="Generic type name used by alias statements")
@click.option("--separator", default=DEFAULT_SEPARATOR, callback=_non_empty, help="Separator between mangled name segments")
@click.option("--indent", default=2, type=int, help="Spaces per indentation level")
@click.option("--verbose", is_flag=True, help="Show debug logging and per-phase timings")
@click.option("--quiet", is_flag=True, help="Suppress all output except errors")
def flatten_cmd(
    path: str,
    output_path: str | None,
    lenient: bool,
    import_marker: str,
    separator: str,
    indent: int,
    verbose: bool,
    quiet: bool,
) -> None:
    """Flatten the namespaces of a declaration file."""
    _configure_logging(verbose, quiet)

    config = PipelineConfig(
        input_path=str(Path(path).resolve()),
        output_path=output_path,
        flatten=FlattenConfig(
            strict=not lenient,
            separator=separator,
            import_marker=import_marker,
            indent=indent,
        ),
        verbose=verbose,
        quiet=quiet,
    )

    try:
        if quiet or output_path is None:
            result = run_pipeline(config)
        else:
            result = _run_with_progress(config)
    except DtsFlatError as e:
        _fail(e)
        return

    if output_path is None:
        click.echo(result.text, nl=False)
        return

    write_output(result.text, output_path)
    if not quiet:
        from rich.console import Console
        Console(stderr=True).print(f"[green]Output written to:[/green] {output_path}")


@cli.command("graph")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", "output_path", default=None, help="Output JSON file path")
@click.option("--lenient", is_flag=True, help="Emit placeholders for unsupported shapes instead of failing")
def graph_cmd(path: str, output_path: str | None, lenient: bool) -> None:
    """Write the namespace nesting and alias graph as JSON."""
    _configure_logging(False, False)

    input_path = Path(path).resolve()
    if output_path is None:
        output_path = f"{input_path.name}.namespaces.json"

    config = PipelineConfig(input_path=str(input_path), flatten=FlattenConfig(strict=not lenient))
    try:
        result = run_pipeline(config)
    except DtsFlatError as e:
        _fail(e)
        return

    write_json(build_graph_report(result.flat), output_path)
    click.echo(f"Graph written to: {output_path}")


if __name__ == "__main__":
    cli()
