from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..config import CleanerConfig
from ..domain.services.summary import summarize_patient_missingness

if TYPE_CHECKING:
    import pandas as pd

    from ..domain.entities.issues import DataQualityIssue
    from ..domain.entities.schema import SchemaDictionary
    from ..domain.services.summary import RunSummary


def _empty_issue_list() -> list[DataQualityIssue]:
    return []


@dataclass(slots=True)
class CleanDatasetRequest:
    raw: pd.DataFrame
    schema: SchemaDictionary
    config: CleanerConfig = field(default_factory=CleanerConfig)
    source_file: str | None = None


@dataclass(slots=True)
class CleanDatasetResponse:
    visits: pd.DataFrame
    events: pd.DataFrame
    summary: RunSummary
    schema: SchemaDictionary
    config: CleanerConfig
    issues: list[DataQualityIssue] = field(default_factory=_empty_issue_list)

    @property
    def has_issues(self) -> bool:
        return len(self.issues) > 0

    def patient_missingness(self) -> pd.DataFrame:
        return summarize_patient_missingness(self.visits, self.schema, self.config)
