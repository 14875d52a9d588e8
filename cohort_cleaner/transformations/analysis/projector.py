"""Typed analysis columns for time-varying variables.

The original textual column remains the authority for display and audit (it
keeps ``""`` apart from ``<NA>``); the projected column sits right after it
and collapses both to missing for statistics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

from ...domain.entities.issues import parse_warning
from ...domain.entities.schema import TemporalCategory
from ...domain.exceptions import SchemaMismatch
from ...domain.services.column_resolver import analysis_suffix
from ...pandas_utils import as_text_series
from ..base import TransformationContext, TransformationResult
from ..missingness.invariant_propagator import InvariantPropagator
from .decoders import DECODERS

if TYPE_CHECKING:
    from ...domain.entities.issues import DataQualityIssue
    from ...domain.entities.schema import ValueType


class AnalysisProjector:
    name = "AnalysisProjector"
    requires: tuple[str, ...] = (InvariantPropagator.name,)

    def can_transform(self, df: pd.DataFrame, context: TransformationContext) -> bool:
        return bool(self._projections(df, context))

    def transform(
        self, df: pd.DataFrame, context: TransformationContext
    ) -> TransformationResult:
        projections = self._projections(df, context)
        existing = set(map(str, df.columns))
        new_columns: dict[str, pd.Series] = {}
        issues: list[DataQualityIssue] = []
        by_type: dict[str, int] = {}

        for source, target, value_type in projections:
            if target in existing:
                raise SchemaMismatch(
                    f"Analysis column {target!r} for {source!r} collides with an "
                    "existing column"
                )
            decoded = DECODERS[value_type](df[source], context.config)
            new_columns[target] = decoded.values
            by_type[value_type.value] = by_type.get(value_type.value, 0) + 1
            if len(decoded.failures):
                raw = as_text_series(df[source])
                issues.extend(
                    parse_warning(source, row, str(raw.loc[row]), decoded.target)
                    for row in decoded.failures
                )

        ordered: dict[str, pd.Series] = {}
        for col in map(str, df.columns):
            ordered[col] = df[col]
            for source, target, _ in projections:
                if source == col:
                    ordered[target] = new_columns[target]
        projected = pd.DataFrame(ordered, index=df.index)

        return TransformationResult(
            data=projected,
            applied=True,
            message=f"Created {len(new_columns)} analysis columns",
            issues=issues,
            metadata={
                "analysis_columns": list(new_columns),
                "columns_by_type": by_type,
                "parse_failures": len(issues),
            },
        )

    @staticmethod
    def _projections(
        df: pd.DataFrame, context: TransformationContext
    ) -> list[tuple[str, str, ValueType]]:
        result = []
        columns = list(map(str, df.columns))
        for col in context.schema.columns_with(
            temporal=TemporalCategory.VARYING, present_in=columns
        ):
            entry = context.schema.get(col)
            if entry is None or entry.value_type not in DECODERS:
                continue
            suffix = analysis_suffix(entry.value_type, context.config)
            result.append((col, f"{col}{suffix}", entry.value_type))
        return result
