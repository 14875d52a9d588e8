"""Run and patient-level summaries consumed by reporting collaborators."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

import pandas as pd

from ..entities.schema import DomainCategory, SchemaDictionary

if TYPE_CHECKING:
    from ...config import CleanerConfig
    from ..entities.issues import DataQualityIssue


@dataclass(frozen=True, slots=True)
class RunSummary:
    raw_rows: int
    raw_columns: int
    visit_rows: int
    visit_columns: int
    event_rows: int
    event_columns: int
    unique_patients: int
    visits_per_patient: dict[int, int]
    columns_by_domain: dict[str, int]
    conversion_counts: dict[str, int]
    fill_counts: dict[str, int]
    analysis_columns: tuple[str, ...]
    issue_counts: dict[str, int]

    @property
    def total_conversions(self) -> int:
        return sum(self.conversion_counts.values())

    @property
    def total_fills(self) -> int:
        return sum(self.fill_counts.values())

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["analysis_columns"] = list(self.analysis_columns)
        data["visits_per_patient"] = {
            str(k): v for k, v in sorted(self.visits_per_patient.items())
        }
        data["total_conversions"] = self.total_conversions
        data["total_fills"] = self.total_fills
        return data


def build_run_summary(
    *,
    raw: pd.DataFrame,
    visits: pd.DataFrame,
    events: pd.DataFrame,
    schema: SchemaDictionary,
    config: CleanerConfig,
    conversion_counts: Mapping[str, int],
    fill_counts: Mapping[str, int],
    analysis_columns: Sequence[str],
    issues: Sequence[DataQualityIssue],
) -> RunSummary:
    patient_col = config.patient_id_column
    per_patient = (
        visits.groupby(patient_col, sort=False).size()
        if patient_col in visits.columns
        else pd.Series(dtype="int64")
    )
    visits_per_patient = Counter(int(n) for n in per_patient.tolist())

    by_domain: Counter[str] = Counter()
    seen: set[str] = set()
    for col in [*visits.columns, *events.columns]:
        entry = schema.get(str(col))
        if entry is None or col in seen:
            continue
        seen.add(str(col))
        by_domain[entry.domain_category.value] += 1

    return RunSummary(
        raw_rows=len(raw),
        raw_columns=raw.shape[1],
        visit_rows=len(visits),
        visit_columns=visits.shape[1],
        event_rows=len(events),
        event_columns=events.shape[1],
        unique_patients=int(per_patient.size),
        visits_per_patient=dict(visits_per_patient),
        columns_by_domain={
            d.value: by_domain[d.value] for d in DomainCategory if by_domain[d.value]
        },
        conversion_counts={k: v for k, v in conversion_counts.items() if v},
        fill_counts={k: v for k, v in fill_counts.items() if v},
        analysis_columns=tuple(analysis_columns),
        issue_counts=dict(Counter(issue.kind.value for issue in issues)),
    )


def summarize_patient_missingness(
    visits: pd.DataFrame, schema: SchemaDictionary, config: CleanerConfig
) -> pd.DataFrame:
    """One row per patient counting variables that are missing at every visit.

    Only dictionary columns are considered; identifiers and event columns are
    skipped. An empty string is data (visit-scoped absence), not missingness.
    """
    patient_col = config.patient_id_column
    keys = {patient_col, config.visit_number_column}
    analysis_vars = [
        str(col)
        for col in visits.columns
        if col not in keys
        and (entry := schema.get(str(col))) is not None
        and not entry.is_event
        and not entry.is_identifier
    ]
    result_columns = [
        "patient_id",
        "total_variables",
        "variables_with_data",
        "variables_missing",
        "pct_missing",
    ]
    if not analysis_vars or visits.empty:
        return pd.DataFrame(columns=result_columns)

    all_missing = (
        visits[analysis_vars]
        .isna()
        .groupby(visits[patient_col], sort=False)
        .all()
    )
    total = len(analysis_vars)
    missing = all_missing.sum(axis=1).astype(int)
    summary = pd.DataFrame(
        {
            "patient_id": all_missing.index.astype(str).to_numpy(),
            "total_variables": total,
            "variables_with_data": (total - missing).to_numpy(),
            "variables_missing": missing.to_numpy(),
            "pct_missing": (missing / total * 100).round(1).to_numpy(),
        },
        columns=result_columns,
    )
    return summary.sort_values(
        ["pct_missing", "variables_missing"], ascending=False, kind="stable"
    ).reset_index(drop=True)
