from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING, override

from rich.console import Console
from rich.markup import escape

from ...application.ports.services import LoggerPort
from ...constants import LogLevels
from ...domain.entities.issues import IssueKind

if TYPE_CHECKING:
    from ...domain.entities.issues import DataQualityIssue
    from ...domain.services.summary import RunSummary


class LogLevel(IntEnum):
    NORMAL = LogLevels.NORMAL
    VERBOSE = LogLevels.VERBOSE
    DEBUG = LogLevels.DEBUG


@dataclass(slots=True)
class LogContext:
    source_file: str = ""
    step: str = ""
    start_time: datetime = field(default_factory=datetime.now)

    def elapsed_ms(self) -> float:
        return (datetime.now() - self.start_time).total_seconds() * 1000


class ConsoleLogger(LoggerPort):
    """Rich console logger with verbosity levels and run statistics."""

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        super().__init__()
        self.console = console or Console()
        self.verbosity = verbosity
        self._context: LogContext | None = None
        self._stats: dict[str, int] = {
            "steps_completed": 0,
            "issues": 0,
            "warnings": 0,
            "errors": 0,
        }

    def set_context(self, **kwargs: str) -> None:
        if self._context is None:
            self._context = LogContext()
        for key, value in kwargs.items():
            if hasattr(self._context, key):
                setattr(self._context, key, value)

    def clear_context(self) -> None:
        self._context = None

    @override
    def info(self, message: str, *, level: int = LogLevel.NORMAL) -> None:
        if self.verbosity >= level:
            prefix = self._get_prefix()
            self.console.print(f"{prefix}{message}")

    @override
    def verbose(self, message: str) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            prefix = self._get_prefix()
            self.console.print(f"[dim]{prefix}{message}[/dim]")

    @override
    def debug(self, message: str) -> None:
        if self.verbosity >= LogLevel.DEBUG:
            prefix = self._get_prefix()
            self.console.print(f"[dim cyan]{prefix}{message}[/dim cyan]")

    @override
    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    @override
    def warning(self, message: str) -> None:
        self._stats["warnings"] += 1
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    @override
    def error(self, message: str) -> None:
        self._stats["errors"] += 1
        self.console.print(f"[red]✗[/red] {message}")

    @override
    def log_step_start(self, step: str, rows: int, columns: int) -> None:
        self.set_context(step=step)
        if self._context is not None:
            self._context.start_time = datetime.now()
        self.verbose(f"{step}: {rows:,} rows x {columns} columns")

    @override
    def log_step_complete(self, step: str, message: str) -> None:
        self._stats["steps_completed"] += 1
        elapsed = ""
        if self._context is not None and self.verbosity >= LogLevel.DEBUG:
            elapsed = f" ({self._context.elapsed_ms():.0f} ms)"
        self.verbose(f"  {message}{elapsed}")

    @override
    def log_issue(self, issue: DataQualityIssue) -> None:
        self._stats["issues"] += 1
        # Parse failures can run into the thousands; only show them when asked.
        if issue.kind is IssueKind.PARSE:
            self.debug(escape(str(issue)))
        else:
            self.verbose(f"[yellow]{escape(str(issue))}[/yellow]")

    @override
    def log_run_summary(self, summary: RunSummary) -> None:
        self.console.print()
        self.console.print(
            f"[bold]Cleaned {summary.unique_patients} patients[/bold] "
            f"({summary.visit_rows:,} visit rows, {summary.event_rows:,} event rows)"
        )
        self.verbose(
            f"Converted {summary.total_conversions:,} empty values to missing, "
            f"filled {summary.total_fills:,} time-invariant values, "
            f"created {len(summary.analysis_columns)} analysis columns"
        )
        if self.verbosity >= LogLevel.DEBUG:
            for col, count in sorted(summary.fill_counts.items()):
                self.debug(f"    Filled {count} values in {col}")

    def log_final_stats(self) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            self.console.print()
            self.console.print("[dim]Processing Statistics:[/dim]")
            self.console.print(
                f"[dim]  Steps completed: {self._stats['steps_completed']}[/dim]"
            )
            self.console.print(f"[dim]  Data-quality issues: {self._stats['issues']}[/dim]")
            if self._stats["warnings"] > 0:
                self.console.print(
                    f"[dim yellow]  Warnings: {self._stats['warnings']}[/dim yellow]"
                )
            if self._stats["errors"] > 0:
                self.console.print(
                    f"[dim red]  Errors: {self._stats['errors']}[/dim red]"
                )

    def get_stats(self) -> dict[str, int]:
        return self._stats.copy()

    def reset_stats(self) -> None:
        self._stats = {
            "steps_completed": 0,
            "issues": 0,
            "warnings": 0,
            "errors": 0,
        }

    def _get_prefix(self) -> str:
        if self._context is None or self.verbosity < LogLevel.DEBUG:
            return ""
        parts = [p for p in (self._context.source_file, self._context.step) if p]
        return escape(f"[{':'.join(parts)}] ") if parts else ""
