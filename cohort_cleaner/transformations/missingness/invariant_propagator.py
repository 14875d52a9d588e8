"""Within-patient filling of time-invariant variables.

Must run after :class:`MissingnessResolver`: a column that is empty at every
visit has already become ``pd.NA`` and stays that way, because there is no
value to fill it with.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

from ...domain.entities.issues import conflict_warning
from ...domain.entities.schema import TemporalCategory
from ...domain.exceptions import MissingIdentifierError
from ...pandas_utils import as_text_series, blank_mask
from ..base import TransformationContext, TransformationResult
from .missingness_resolver import MissingnessResolver

if TYPE_CHECKING:
    from ...domain.entities.issues import DataQualityIssue


def visit_order(df: pd.DataFrame, visit_column: str) -> pd.Index:
    """Row labels ordered by numeric visit number, ties kept in row order."""
    if visit_column not in df.columns:
        return df.index
    numbers = pd.to_numeric(
        as_text_series(df[visit_column]).str.strip().astype(object), errors="coerce"
    ).astype("float64")
    return numbers.sort_values(kind="stable", na_position="last").index


class InvariantPropagator:
    name = "InvariantPropagator"
    requires: tuple[str, ...] = (MissingnessResolver.name,)

    def can_transform(self, df: pd.DataFrame, context: TransformationContext) -> bool:
        return bool(self._target_columns(df, context))

    def transform(
        self, df: pd.DataFrame, context: TransformationContext
    ) -> TransformationResult:
        config = context.config
        patient_col = config.patient_id_column
        if patient_col not in df.columns:
            raise MissingIdentifierError(
                f"Patient identifier column {patient_col!r} not found in visit records"
            )

        filled = df.copy()
        targets = self._target_columns(df, context)
        order = visit_order(df, config.visit_number_column)
        patients = as_text_series(df[patient_col]).str.strip().loc[order]
        fill_counts: dict[str, int] = {}
        issues: list[DataQualityIssue] = []

        for col in targets:
            values = as_text_series(filled[col]).loc[order]
            blank = blank_mask(values)
            present = values[~blank]
            if present.empty:
                continue
            # First recorded value per patient in visit order.
            first = present.groupby(patients[~blank], sort=False).first()
            fill_values = patients.map(first)
            to_fill = blank & fill_values.notna()
            if to_fill.any():
                updated = values.mask(to_fill, fill_values)
                filled[col] = updated.reindex(df.index).astype("string")
                fill_counts[col] = int(to_fill.sum())
            issues.extend(self._conflicts(col, present, patients[~blank], first))

        total = sum(fill_counts.values())
        return TransformationResult(
            data=filled,
            applied=True,
            message=(
                f"Filled {total} values in {len(fill_counts)} of "
                f"{len(targets)} time-invariant columns"
            ),
            issues=issues,
            metadata={"columns_checked": len(targets), "fill_counts": fill_counts},
        )

    @staticmethod
    def _target_columns(df: pd.DataFrame, context: TransformationContext) -> list[str]:
        return [
            col
            for col in context.schema.columns_with(
                temporal=TemporalCategory.INVARIANT, present_in=list(map(str, df.columns))
            )
            if col != context.config.patient_id_column
        ]

    @staticmethod
    def _conflicts(
        column: str, present: pd.Series, patients: pd.Series, first: pd.Series
    ) -> list[DataQualityIssue]:
        issues: list[DataQualityIssue] = []
        for patient, group in present.groupby(patients, sort=False):
            distinct = tuple(dict.fromkeys(str(v) for v in group.tolist()))
            if len(distinct) > 1:
                issues.append(
                    conflict_warning(column, str(patient), distinct, str(first[patient]))
                )
        return issues
