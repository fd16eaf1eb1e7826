from __future__ import annotations
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text
from rich.markup import escape
from .models import CheckResult, Status, Summary

ICONS = {Status.PASS: "✅", Status.WARN: "⚠️", Status.FAIL: "❌"}


class Reporter:
    def __init__(self, console: Console) -> None:
        self.console = console

    def result(self, r: CheckResult) -> None:
        """One status line per check, printed as soon as it completes."""
        icon = ICONS[r.outcome.status]
        reason = f" {escape(r.outcome.reason)}" if r.outcome.reason else ""
        self.console.print(f"{icon} [bold]{escape(r.name)}[/bold] {escape(r.description)}:{reason}", highlight=False)

    def table(self, title: str, summary: Summary) -> None:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Status", width=8)
        table.add_column("Check", style="bold")
        table.add_column("Message")
        table.add_column("Time", justify="right")
        for r in summary.results:
            table.add_row(ICONS[r.outcome.status], escape(r.name), escape(r.outcome.reason), f"{r.duration_s:.1f}s")
        self.console.print(Panel.fit(table, title=Text(title, style="bold blue")))

    def summary(self, summary: Summary) -> None:
        ok, warn, fail = summary.counts()
        table = Table(show_header=True, header_style="bold")
        table.add_column("OK")
        table.add_column("WARN")
        table.add_column("FAIL")
        table.add_row(str(ok), str(warn), str(fail))
        if fail > 0:
            style = "bold red"
        elif warn > 0:
            style = "bold yellow"
        else:
            style = "bold green"
        self.console.print(Panel.fit(table, title=Text("Summary", style=style)))

    def fatal(self, message: str) -> None:
        self.console.print(f"❌ [bold red]{escape(message)}[/bold red]", highlight=False)
