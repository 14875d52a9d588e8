from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities.issues import DataQualityIssue
    from ...domain.services.summary import RunSummary


@runtime_checkable
class LoggerPort(Protocol):
    pass

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...

    def verbose(self, message: str) -> None: ...

    def log_step_start(self, step: str, rows: int, columns: int) -> None: ...

    def log_step_complete(self, step: str, message: str) -> None: ...

    def log_issue(self, issue: DataQualityIssue) -> None: ...

    def log_run_summary(self, summary: RunSummary) -> None: ...
