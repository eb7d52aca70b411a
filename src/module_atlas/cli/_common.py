"""Shared CLI helpers."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console

from ..api import analyze
from ..exceptions import AtlasError
from ..graph.models import AnalysisResult
from ..logging_config import get_logger

console = Console()
logger = get_logger(__name__)


def run_analysis(
    path: Path,
    config: Optional[Path] = None,
    classes: bool = False,
    workers: Optional[int] = None,
    extensions: Optional[list[str]] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> AnalysisResult:
    """Build overrides from CLI options and run the analysis."""
    overrides: dict = {"verbose": verbose, "quiet": quiet}
    if classes:
        overrides["include_classes"] = True
    if workers is not None:
        overrides["workers"] = workers
    if extensions:
        overrides["extensions"] = tuple(
            ext if ext.startswith(".") else f".{ext}" for ext in extensions
        )
    return analyze(path, config_file=config, **overrides)


@contextmanager
def handle_errors(verbose: bool = False) -> Iterator[None]:
    """Turn library errors into a red message and a non-zero exit."""
    try:
        yield
    except typer.Exit:
        raise
    except AtlasError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error during analysis")
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


def exit_for_errors(result: AnalysisResult, strict: bool) -> None:
    """Exit 1 in strict mode when any file failed."""
    if strict and result.errors:
        console.print(f"[red]{len(result.errors)} file(s) failed (--strict)[/red]")
        raise typer.Exit(1)
