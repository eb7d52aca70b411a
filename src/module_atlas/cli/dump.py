"""JSON output command: one file per list."""

from pathlib import Path
from typing import List, Optional

import typer

from ..formatters import write_json_lists
from . import app
from ._common import console, exit_for_errors, handle_errors, run_analysis


@app.command("json")
def dump_json(
    path: Path = typer.Argument(
        Path("."),
        help="Project directory or single source file",
        exists=True,
        file_okay=True,
        dir_okay=True,
    ),
    output: Path = typer.Option(
        Path("."),
        "--output",
        "-o",
        help="Directory the JSON files are written to",
        file_okay=False,
        dir_okay=True,
    ),
    classes: bool = typer.Option(
        False,
        "--classes",
        help="Also extract class detail and write ClassList.json",
    ),
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
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress logging"),
) -> None:
    """Write ModuleArray, DependencyList, ExportList and Errors as JSON files."""
    with handle_errors(verbose):
        result = run_analysis(path, config, classes, workers, ext, verbose, quiet)
        written = write_json_lists(result, output, include_classes=classes)

        if not quiet:
            for file_path in written:
                console.print(f"Wrote [blue]{file_path}[/blue]")
            if result.errors:
                console.print(f"[yellow]{len(result.errors)} file(s) failed, see Errors.json[/yellow]")

        exit_for_errors(result, strict)
