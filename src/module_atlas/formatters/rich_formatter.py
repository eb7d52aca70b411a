"""Rich terminal formatter for module-atlas."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..graph.models import AnalysisResult
from .base import BaseFormatter


def _count_label(count: int) -> str:
    if count == 0:
        return "[dim]0[/dim]"
    elif count >= 10:
        return f"[yellow bold]{count}[/yellow bold]"
    return str(count)


class RichFormatter(BaseFormatter):
    """Summary panel, per-module table, node modules and errors."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render(self, result: AnalysisResult) -> None:
        self._print_summary(result)
        self._print_modules(result)
        self._print_node_modules(result)
        self._print_errors(result)

    def format(self, result: AnalysisResult) -> str:
        with self.console.capture() as capture:
            self.render(result)
        return capture.get()

    def render_debug(self, result: AnalysisResult) -> None:
        """Print every module with its exports and dependencies."""
        for module in result.modules:
            module_id = module.module_id
            self.console.print(f"[bold cyan]{module_id}[/bold cyan]")
            for export in result.exported_by(module_id):
                params = export.parameter_signature or ""
                source = f" [dim]from {export.source_module}[/dim]" if export.source_module else ""
                self.console.print(
                    f"  [green]export[/green] {export.exported_name}{params} "
                    f"[dim]({export.kind_tag})[/dim]{source}"
                )
            for dep in result.depends_on(module_id):
                target = dep.resolved_module_id
                if dep.resolved_module_id != dep.raw_specifier:
                    target = f"{dep.raw_specifier} -> {dep.resolved_module_id}"
                self.console.print(f"  [blue]import[/blue] {dep.imported_name} from {target}")
        self._print_errors(result)

    def _print_summary(self, result: AnalysisResult) -> None:
        lines = [
            f"Modules: [bold]{len(result.modules)}[/bold]",
            f"Exports: [bold]{len(result.exports)}[/bold]",
            f"Dependencies: [bold]{len(result.dependencies)}[/bold]",
            f"Node modules: [bold]{len(result.node_modules())}[/bold]",
            f"Errors: [bold]{len(result.errors)}[/bold]",
        ]
        if result.cancelled:
            lines.append("[yellow]Run was cancelled; results are partial[/yellow]")
        self.console.print(
            Panel("\n".join(lines), title="[bold cyan]module-atlas[/bold cyan]", expand=False)
        )

    def _print_modules(self, result: AnalysisResult) -> None:
        if not result.modules:
            self.console.print("[yellow]No modules found.[/yellow]")
            return

        table = Table(title="Modules", show_lines=False)
        table.add_column("Module", style="cyan")
        table.add_column("Depends on", justify="right")
        table.add_column("Used by", justify="right")
        table.add_column("Exports", justify="right")

        for module in result.modules:
            table.add_row(
                module.module_id,
                _count_label(module.depends_on_count),
                _count_label(module.used_by_count),
                _count_label(module.export_count),
            )
        self.console.print(table)

    def _print_node_modules(self, result: AnalysisResult) -> None:
        node_modules = result.node_modules()
        if node_modules:
            self.console.print(f"[bold]Node modules:[/bold] {', '.join(node_modules)}")

    def _print_errors(self, result: AnalysisResult) -> None:
        if not result.errors:
            return
        self.console.print(f"[red bold]{len(result.errors)} file(s) failed:[/red bold]")
        for error in result.errors:
            self.console.print(f"  [red]{error.code.value}[/red] {error.file}: {error.message}")
