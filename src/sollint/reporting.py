"""
Reporters receive one ``AnalysisReport`` per analyzed file.

``report()`` is called once per file in the order files were analyzed,
and ``finish()`` once at the end of a run.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .findings import AnalysisReport, Severity

SEVERITY_STYLES = {
    Severity.HIGH: "bold red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
    Severity.INFO: "dim",
}


class Reporter:
    def report(self, report: AnalysisReport) -> None:
        raise NotImplementedError

    def report_error(self, filename: str, message: str) -> None:
        """A file could not be analyzed."""

    def finish(self) -> None:
        pass


class CollectingReporter(Reporter):
    """Keeps reports in memory."""

    def __init__(self):
        self.reports: List[AnalysisReport] = []
        self.errors: List[tuple] = []

    def report(self, report: AnalysisReport) -> None:
        self.reports.append(report)

    def report_error(self, filename: str, message: str) -> None:
        self.errors.append((filename, message))

    @property
    def findings(self):
        return [f for r in self.reports for f in r.findings]


class ConsoleReporter(Reporter):
    """One rich table per file, followed by a summary line."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.files = 0
        self.total = 0
        self.failed = 0

    def report(self, report: AnalysisReport) -> None:
        self.files += 1
        self.total += len(report.findings)
        if not report.findings:
            self.console.print(f"[green]✓[/green] {escape(report.filename)}: no findings")
            return

        table = Table(title=escape(report.filename), title_justify="left")
        table.add_column("Severity")
        table.add_column("Rule", style="magenta")
        table.add_column("Location", style="blue")
        table.add_column("Line", justify="right", style="yellow")
        table.add_column("Message")
        for f in report.findings:
            style = SEVERITY_STYLES.get(f.severity, "")
            table.add_row(
                f"[{style}]{f.severity.value.upper()}[/{style}]",
                f.rule.value,
                f.location,
                str(f.line) if f.line is not None else "",
                f.message,
            )
        self.console.print(table)

    def report_error(self, filename: str, message: str) -> None:
        self.failed += 1
        self.console.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False, soft_wrap=True)

    def finish(self) -> None:
        parts = [f"{self.total} finding(s) in {self.files} file(s)"]
        if self.failed:
            parts.append(f"{self.failed} file(s) failed to parse")
        self.console.print(f"[bold]{', '.join(parts)}[/bold]")


class JsonReporter(Reporter):
    """Writes a single JSON document for the whole run at ``finish()``."""

    def __init__(self, indent: int = 2):
        self.indent = indent
        self.files: List[Dict[str, Any]] = []
        self.errors: List[Dict[str, str]] = []

    def report(self, report: AnalysisReport) -> None:
        self.files.append(report.to_dict())

    def report_error(self, filename: str, message: str) -> None:
        self.errors.append({"file": filename, "error": message})

    def document(self) -> Dict[str, Any]:
        return {
            "files": self.files,
            "errors": self.errors,
            "total_findings": sum(len(f["findings"]) for f in self.files),
        }

    def finish(self) -> None:
        click.echo(json.dumps(self.document(), indent=self.indent))
