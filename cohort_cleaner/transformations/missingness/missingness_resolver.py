"""Patient-level missingness resolution.

For every (patient, column) pair of the visit records: when the patient has
no value for the column at any visit and at least one of those cells is an
empty string, every cell of the pair becomes ``pd.NA`` (true missingness).
When any visit holds a value, empty cells stay ``""``: the assessment was not
administered at that visit, which is not the same as unknown.

The rewrite only ever goes from empty to missing, and each pair is decided
independently of every other pair.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

from ...domain.exceptions import MissingIdentifierError
from ...pandas_utils import as_text_series, blank_mask, empty_mask
from ..base import TransformationContext, TransformationResult

if TYPE_CHECKING:
    from ...domain.entities.schema import SchemaDictionary


def patient_level_missing_mask(values: pd.Series, patients: pd.Series) -> pd.Series:
    """Cells to rewrite as missing, for one column grouped by patient."""
    blank = blank_mask(values)
    empty = empty_mask(values)
    all_blank = blank.groupby(patients, sort=False, dropna=False).transform("all")
    any_empty = empty.groupby(patients, sort=False, dropna=False).transform("any")
    return (all_blank & any_empty).astype(bool)


def resolvable_columns(
    columns: pd.Index, schema: SchemaDictionary, patient_id_column: str
) -> list[str]:
    """Dictionary columns subject to resolution: everything but events and the key."""
    result: list[str] = []
    for col in map(str, columns):
        if col == patient_id_column:
            continue
        entry = schema.get(col)
        if entry is not None and not entry.is_event:
            result.append(col)
    return result


class MissingnessResolver:
    name = "MissingnessResolver"
    requires: tuple[str, ...] = ()

    def can_transform(self, df: pd.DataFrame, context: TransformationContext) -> bool:
        _ = context
        return not df.empty

    def transform(
        self, df: pd.DataFrame, context: TransformationContext
    ) -> TransformationResult:
        patient_col = context.config.patient_id_column
        if patient_col not in df.columns:
            raise MissingIdentifierError(
                f"Patient identifier column {patient_col!r} not found in visit records"
            )

        resolved = df.copy()
        patients = as_text_series(df[patient_col]).str.strip()
        targets = resolvable_columns(df.columns, context.schema, patient_col)
        conversions: dict[str, int] = {}

        for col in targets:
            values = as_text_series(resolved[col])
            mask = patient_level_missing_mask(values, patients)
            if not mask.any():
                continue
            conversions[col] = int((empty_mask(values) & mask).sum())
            resolved[col] = values.mask(mask, pd.NA)

        total = sum(conversions.values())
        return TransformationResult(
            data=resolved,
            applied=True,
            message=(
                f"Converted {total} patient-level empty values to missing "
                f"in {len(conversions)} of {len(targets)} columns"
            ),
            metadata={
                "columns_checked": len(targets),
                "patients": int(patients.nunique()),
                "conversion_counts": conversions,
            },
        )
