from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from ...domain.entities.issues import IssueKind

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from rich.console import Console

    from ...domain.entities.issues import DataQualityIssue
    from ...domain.services.summary import RunSummary
    from ...infrastructure.io.dataset_writer import WrittenFiles

MAX_LISTED_ISSUES = 20


@dataclass(frozen=True, slots=True)
class SummaryRequest:
    summary: RunSummary
    issues: Sequence[DataQualityIssue]
    output_dir: Path
    files: WrittenFiles | None = None
    show_parse_warnings: bool = False


class SummaryPresenter:
    pass

    def __init__(self, console: Console) -> None:
        super().__init__()
        self.console = console

    def present(self, request: SummaryRequest) -> None:
        self.console.print()
        self.console.print(self._build_summary_table(request.summary))
        self.console.print()
        self._print_issue_counts(request.summary)
        self._print_output_information(request)
        self._print_issue_details(request.issues, request.show_parse_warnings)

    def _build_summary_table(self, summary: RunSummary) -> Table:
        table = Table(
            title="🧹 Cleaning Summary",
            show_header=True,
            header_style="bold cyan",
            border_style="bright_blue",
            title_style="bold magenta",
        )
        table.add_column("Table", style="cyan", no_wrap=True)
        table.add_column("Rows", justify="right", style="yellow", no_wrap=True)
        table.add_column("Columns", justify="right", style="yellow", no_wrap=True)
        table.add_column("Notes", style="dim", overflow="fold", ratio=2)
        table.add_row("Raw export", f"{summary.raw_rows:,}", str(summary.raw_columns), "")
        table.add_row(
            "Visits",
            f"{summary.visit_rows:,}",
            str(summary.visit_columns),
            f"{len(summary.analysis_columns)} analysis columns",
        )
        table.add_row(
            "Adverse events",
            f"{summary.event_rows:,}",
            str(summary.event_columns),
            "",
        )
        table.add_section()
        table.add_row(
            "[bold]Patients[/bold]",
            f"[bold yellow]{summary.unique_patients:,}[/bold yellow]",
            "",
            self._visit_distribution(summary),
        )
        table.add_row(
            "Missing (converted)",
            f"{summary.total_conversions:,}",
            str(len(summary.conversion_counts)),
            "",
        )
        table.add_row(
            "Invariants filled",
            f"{summary.total_fills:,}",
            str(len(summary.fill_counts)),
            "",
        )
        return table

    @staticmethod
    def _visit_distribution(summary: RunSummary) -> str:
        parts = [
            f"{count} with {visits} visit{'s' if visits != 1 else ''}"
            for visits, count in sorted(summary.visits_per_patient.items())
        ]
        return ", ".join(parts)

    def _print_issue_counts(self, summary: RunSummary) -> None:
        total = sum(summary.issue_counts.values())
        if total == 0:
            self.console.print("[green]✓[/green] No data-quality issues")
            return
        counts = ", ".join(
            f"{kind}: {count}" for kind, count in sorted(summary.issue_counts.items())
        )
        self.console.print(f"[yellow]⚠[/yellow] {total} data-quality issues ({counts})")

    def _print_output_information(self, request: SummaryRequest) -> None:
        self.console.print(f"[bold]Output:[/bold] {escape(str(request.output_dir))}")
        files = request.files
        if files is None:
            return
        for label, path in (
            ("visits", files.visits),
            ("adverse events", files.events),
            ("summary", files.summary),
            ("issues", files.issues),
        ):
            self.console.print(f"  [dim]{label}:[/dim] {escape(path.name)}")

    def _print_issue_details(
        self, issues: Sequence[DataQualityIssue], show_parse_warnings: bool
    ) -> None:
        listed = [
            i for i in issues if show_parse_warnings or i.kind is not IssueKind.PARSE
        ]
        if not listed:
            return
        self.console.print()
        for issue in listed[:MAX_LISTED_ISSUES]:
            self.console.print(f"  [yellow]{escape(str(issue))}[/yellow]")
        if len(listed) > MAX_LISTED_ISSUES:
            self.console.print(
                f"  [dim]... and {len(listed) - MAX_LISTED_ISSUES} more[/dim]"
            )
