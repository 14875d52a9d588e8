from __future__ import annotations

from typing import TYPE_CHECKING, override

from ...application.ports.services import LoggerPort

if TYPE_CHECKING:
    from ...domain.entities.issues import DataQualityIssue
    from ...domain.services.summary import RunSummary


class NullLogger(LoggerPort):
    pass

    @override
    def info(self, message: str) -> None:
        return

    @override
    def success(self, message: str) -> None:
        return

    @override
    def warning(self, message: str) -> None:
        return

    @override
    def error(self, message: str) -> None:
        return

    @override
    def debug(self, message: str) -> None:
        return

    @override
    def verbose(self, message: str) -> None:
        return

    @override
    def log_step_start(self, step: str, rows: int, columns: int) -> None:
        return None

    @override
    def log_step_complete(self, step: str, message: str) -> None:
        return None

    @override
    def log_issue(self, issue: DataQualityIssue) -> None:
        return None

    @override
    def log_run_summary(self, summary: RunSummary) -> None:
        return None
