# src/composcript/cli/formatter.py
import difflib
from typing import Any, Dict

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from composcript.core.engine import BuildResult

# Shared console so progress, logs and reports interleave cleanly
console = Console()


class BuildFormatter:
    """
    BuildFormatter: the visual side of the CLI.
    Renders build reports, diagnostics and artifact diffs.
    """

    def __init__(self, out: Console = None):
        self.console = out or console

    def display_diff(self, previous: str, current: str, file_name: str):
        """Colorized unified diff between the old and the new bundle."""
        diff_list = list(difflib.unified_diff(
            (previous or "").splitlines(),
            current.splitlines(),
            fromfile=f"Previous: {file_name}",
            tofile="New build",
            lineterm="",
        ))

        if not diff_list:
            self.console.print(f"[dim]ℹ No changes in {file_name}.[/dim]")
            return

        syntax = Syntax("\n".join(diff_list), "diff", theme="monokai", line_numbers=True)
        self.console.print(Panel(syntax, title=f"Bundle diff: {file_name}", border_style="green"))

    def show_diagnostics(self, result: BuildResult):
        for failure in result.failures:
            self.console.print(f"[bold red]✗ {failure['status']}[/bold red] {failure['error']}")

    def print_report(self, result: BuildResult):
        table = Table(title="Composcript Build Report", show_header=True, header_style="bold magenta")
        table.add_column("File", style="cyan")
        table.add_column("Tag")
        table.add_column("Class")
        table.add_column("Attributes", justify="right")
        table.add_column("Status")
        table.add_column("Result", justify="center")

        for r in result.reports:
            success = r.get("success", False)
            color = "green" if success else "red"
            table.add_row(
                r.get("file_path"),
                f"<{r.get('tag_name')}>",
                r.get("class_name", "-"),
                str(r.get("attributes", "-")),
                f"[{color}]{r.get('status')}[/{color}]",
                "✅" if success else "❌",
            )

        self.console.print(table)

    def print_summary(self, summary: Dict[str, Any], result: BuildResult):
        if result.aborted:
            headline = "[bold red]Build aborted, bundle not written[/bold red]"
        elif result.written:
            headline = f"[bold green]OK[/bold green] → {result.output_path}"
        else:
            headline = "[bold yellow]Dry run, bundle not written[/bold yellow]"

        self.console.print(Panel(
            f"{headline}\n"
            f"════════════════════════════════════════\n"
            f"Components:     {summary['total_files']}\n"
            f"Compiled:       [green]{summary['compiled']}[/green]\n"
            f"Failed:         [red]{summary['failed']}[/red]\n"
            f"Markup blocks:  {summary['markup_blocks']}",
            border_style="dim",
        ))
