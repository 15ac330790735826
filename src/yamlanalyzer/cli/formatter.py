# src/yamlanalyzer/cli/formatter.py
import difflib
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from yamlanalyzer.core.models import AnalysisReport, AnalysisStatus, FixResult, Severity, Suggestion

# Initialize the Rich console for high-quality terminal output
console = Console()


class ReportFormatter:
    """
    ReportFormatter: the visual half of the CLI.
    Renders analysis reports, suggestion tables, hints and fix diffs.
    """

    def __init__(self, out: Optional[Console] = None):
        self.console = out or console

    def show_report(self, report: AnalysisReport, source_name: str):
        if report.status == AnalysisStatus.EMPTY:
            self.console.print(f"[yellow]{report.message}[/yellow]")
            return

        if report.fix_result and report.fix_result.applied_fixes:
            self.show_applied_fixes(report.fix_result)

        if report.ok:
            self.console.print(f"[bold green]✔ {escape(report.message)}[/bold green]")
            self.console.print(Panel(
                Syntax(report.rendered, "json", theme="monokai", word_wrap=True),
                title=f"Parsed: {escape(source_name)}",
                border_style="green",
            ))
        else:
            self.console.print(Panel(
                Text(report.error.message if report.error else report.message),
                title="[bold red]YAML Error[/bold red]",
                subtitle=self._position(report),
                border_style="red",
            ))
            self.show_hints(report.hints)
            if report.retry_candidate is not None:
                self.show_retry(report, source_name)

        self.show_suggestions(report.suggestions)

    def show_applied_fixes(self, fix_result: FixResult):
        for description in fix_result.applied_fixes:
            self.console.print(f"[bold cyan]🔧 Auto-fix:[/bold cyan] {escape(description)}")

    def show_hints(self, hints: List[str]):
        if not hints:
            return
        self.console.print("[bold yellow]Possible causes:[/bold yellow]")
        for hint in hints:
            self.console.print(f"  • {escape(hint)}")

    def show_suggestions(self, suggestions: List[Suggestion]):
        """Builds the suggestion table shown after a successful parse."""
        advisories = [s for s in suggestions if s.severity == Severity.ADVISORY]
        if not advisories:
            return

        table = Table(title="Suggestions", show_header=True, header_style="bold magenta", show_lines=True)
        table.add_column("Line", justify="right", style="dim")
        table.add_column("Suggestion", style="white")
        table.add_column("Proposed YAML", style="green")

        for s in advisories:
            table.add_row(
                str(s.anchor_line or "?"),
                f"[bold]{escape(s.title)}[/bold]\n{escape(s.description)}",
                Text(s.suggestion_text),
            )
        self.console.print(table)

    def show_retry(self, report: AnalysisReport, source_name: str):
        verdict = "[green]parses[/green]" if report.retry_parses else "[red]still fails to parse[/red]"
        self.console.print(f"\n[bold cyan]Auto-fix candidate[/bold cyan] ({verdict}); run with --fix to use it.")
        self.display_diff(report.text, report.retry_candidate.fixed_text, source_name)

    def display_diff(self, original_text: str, fixed_text: str, file_name: str):
        """
        Calculates and renders a colorized diff between the original
        text and the normalized output.
        """
        diff_list = list(difflib.unified_diff(
            original_text.splitlines(),
            fixed_text.splitlines(),
            fromfile=f"original/{file_name}",
            tofile=f"fixed/{file_name}",
            lineterm=""
        ))

        if not diff_list:
            self.console.print(f"[dim]ℹ No changes needed for {escape(file_name)}.[/dim]")
            return

        syntax = Syntax("\n".join(diff_list), "diff", theme="monokai", line_numbers=True)
        self.console.print(Panel(syntax, title=f"Proposed fixes: {escape(file_name)}", border_style="cyan"))

    @staticmethod
    def _position(report: AnalysisReport) -> Optional[str]:
        if report.error is None or report.error.line is None:
            return None
        if report.error.column is None:
            return f"line {report.error.line}"
        return f"line {report.error.line}, column {report.error.column}"
