"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="module-atlas",
    help="module-atlas - Dependency & Export Maps for JavaScript/TypeScript",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Analyze module relationships of a JS/TS project."""
    if version:
        console.print(f"module-atlas {__version__}")
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


# Import subcommands to register them
from .dump import dump_json as _dump_json  # noqa: F401, E402
from .debug import debug as _debug  # noqa: F401, E402
from .summary import summary as _summary  # noqa: F401, E402
