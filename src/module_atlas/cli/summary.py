"""Summary command: per-module counts and node modules."""

from pathlib import Path
from typing import List, Optional

import typer

from ..formatters import RichFormatter, get_formatter
from . import app
from ._common import console, exit_for_errors, handle_errors, run_analysis


@app.command()
def summary(
    path: Path = typer.Argument(
        Path("."),
        help="Project directory or single source file",
        exists=True,
        file_okay=True,
        dir_okay=True,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (human-readable) or json",
    ),
    classes: bool = typer.Option(False, "--classes", help="Include class detail"),
    ext: Optional[List[str]] = typer.Option(
        None,
        "--ext",
        "-e",
        help="Recognized extension, in probe order (repeatable)",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Parallel workers (default: auto-detect)",
        min=1,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit 1 if any file could not be analyzed",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Show a table of per-module dependency, used-by and export counts."""
    with handle_errors(verbose):
        try:
            formatter = get_formatter(fmt)
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(2)

        result = run_analysis(path, config, classes, workers, ext, verbose)
        if isinstance(formatter, RichFormatter):
            formatter.console = console
        formatter.render(result)
        exit_for_errors(result, strict)
