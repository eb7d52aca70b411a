"""Debug command: print every module's exports and imports."""

from pathlib import Path
from typing import List, Optional

import typer

from ..formatters import RichFormatter
from . import app
from ._common import console, exit_for_errors, handle_errors, run_analysis


@app.command()
def debug(
    path: Path = typer.Argument(
        Path("."),
        help="Project directory or single source file",
        exists=True,
        file_okay=True,
        dir_okay=True,
    ),
    ext: Optional[List[str]] = typer.Option(
        None,
        "--ext",
        "-e",
        help="Recognized extension, in probe order (repeatable)",
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
    """Print modules with their exports and resolved imports."""
    with handle_errors(verbose):
        # Sequential keeps log output in module order
        result = run_analysis(path, config, workers=1, extensions=ext, verbose=verbose)
        RichFormatter(console).render_debug(result)
        exit_for_errors(result, strict)
