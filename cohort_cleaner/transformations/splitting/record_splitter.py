"""Partition normalized columns into visit records and event records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pandas as pd

from ...domain.entities.issues import unexpected_visit_warning
from ...domain.exceptions import DuplicateVisitError, MissingIdentifierError
from ...pandas_utils import as_text_series, blank_mask

if TYPE_CHECKING:
    from ...config import CleanerConfig
    from ...domain.entities.issues import DataQualityIssue
    from ..base import TransformationContext

MAX_REPORTED_ROWS = 10


def _empty_issues() -> list[DataQualityIssue]:
    return []


@dataclass(slots=True)
class SplitRecords:
    visits: pd.DataFrame
    events: pd.DataFrame
    identifier_columns: list[str]
    event_columns: list[str]
    issues: list[DataQualityIssue] = field(default_factory=_empty_issues)


class RecordSplitter:
    """Split a normalized frame into visit and event records.

    Identifier columns (patient id, visit number, visit date and any other
    ``identifier`` dictionary entry) are repeated in both outputs so each can
    be processed and joined independently. No value is altered.
    """

    name = "RecordSplitter"

    def split(self, df: pd.DataFrame, context: TransformationContext) -> SplitRecords:
        config = context.config
        schema = context.schema
        issues = validate_visit_keys(df, config)

        key_like = {
            config.patient_id_column,
            config.visit_number_column,
            config.visit_date_column,
        }
        identifier_columns: list[str] = []
        event_columns: list[str] = []
        visit_columns: list[str] = []
        for col in map(str, df.columns):
            entry = schema.get(col)
            if col in key_like or (entry is not None and entry.is_identifier):
                identifier_columns.append(col)
                visit_columns.append(col)
            elif entry is not None and entry.is_event:
                event_columns.append(col)
            else:
                visit_columns.append(col)

        return SplitRecords(
            visits=df.loc[:, visit_columns].copy(),
            events=df.loc[:, identifier_columns + event_columns].copy(),
            identifier_columns=identifier_columns,
            event_columns=event_columns,
            issues=issues,
        )


def validate_visit_keys(df: pd.DataFrame, config: CleanerConfig) -> list[DataQualityIssue]:
    """Check that every row carries a unique (patient, visit) key.

    Raises:
        MissingIdentifierError: A key column is absent or a row has a blank key.
        DuplicateVisitError: The same key appears on more than one row.

    Returns:
        Warnings for visit numbers outside the configured range.
    """
    patient_col, visit_col = config.key_columns
    for col in (patient_col, visit_col):
        if col not in df.columns:
            raise MissingIdentifierError(f"Key column {col!r} not found in data")

    for col in (patient_col, visit_col):
        blanks = blank_mask(df[col])
        if blanks.any():
            rows = _row_list(df.index[blanks.to_numpy()])
            raise MissingIdentifierError(f"Blank {col!r} on rows: {rows}")

    patients = as_text_series(df[patient_col]).str.strip()
    visits = as_text_series(df[visit_col]).str.strip()
    numbers = pd.to_numeric(visits.astype(object), errors="coerce").astype("float64")
    # "1" and "1.0" name the same visit; unparseable numbers compare as text.
    keys = pd.DataFrame(
        {"patient": patients, "visit": visits.astype(object).where(numbers.isna(), numbers)}
    )
    duplicated = keys.duplicated(keep=False)
    if duplicated.any():
        first_rows = keys[duplicated].drop_duplicates().index[:MAX_REPORTED_ROWS]
        listed = ", ".join(
            f"({patients.loc[row]}, {visits.loc[row]})" for row in first_rows
        )
        raise DuplicateVisitError(
            f"Duplicate ({patient_col}, {visit_col}) keys: {listed}"
        )

    issues: list[DataQualityIssue] = []
    low, high = config.min_visit_number, config.max_visit_number
    unexpected = numbers.isna() | (numbers < low) | (numbers > high)
    for row in df.index[unexpected.to_numpy()]:
        issues.append(
            unexpected_visit_warning(
                visit_col,
                str(patients.loc[row]),
                row,
                str(visits.loc[row]),
                (low, high),
            )
        )
    return issues


def _row_list(index: pd.Index) -> str:
    rows = [str(r) for r in index[:MAX_REPORTED_ROWS]]
    more = len(index) - len(rows)
    return ", ".join(rows) + (f" (+{more} more)" if more > 0 else "")
