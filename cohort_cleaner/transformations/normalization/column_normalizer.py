"""Rename raw export headers to the normalized, domain-prefixed schema.

Steps, in order:

1. drop structural-marker columns (section headers with no data);
2. rename every dictionary column to its normalized name;
3. keep only the first raw column for each normalized name;
4. drop normalized columns matching a documented duplicate pattern;
5. drop (or, in strict mode, reject) columns missing from the dictionary.

Cell values are carried over untouched, as nullable ``string`` columns so an
empty string and a missing marker stay distinguishable.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import pandas as pd

from ...domain.entities.issues import unmapped_column_warning
from ...domain.exceptions import SchemaMismatch
from ...pandas_utils import as_text_series
from ..base import TransformationContext, TransformationResult

if TYPE_CHECKING:
    from ...domain.entities.issues import DataQualityIssue


class ColumnNormalizer:
    name = "ColumnNormalizer"
    requires: tuple[str, ...] = ()

    def can_transform(self, df: pd.DataFrame, context: TransformationContext) -> bool:
        _ = context
        return df.shape[1] > 0

    def transform(
        self, df: pd.DataFrame, context: TransformationContext
    ) -> TransformationResult:
        config = context.config
        schema = context.schema
        self._check_required_in_schema(context)

        markers = {m.strip() for m in config.structural_markers}
        duplicate_patterns = [re.compile(p) for p in config.duplicate_patterns]

        columns: dict[str, pd.Series] = {}
        dropped_markers: list[str] = []
        dropped_duplicates: list[str] = []
        unmapped: list[str] = []
        issues: list[DataQualityIssue] = []
        renamed = 0

        for position, raw in enumerate(df.columns):
            raw_name = str(raw)
            if raw_name.strip() in markers:
                dropped_markers.append(raw_name)
                continue
            entry = schema.lookup_raw(raw_name)
            if entry is None:
                if config.strict_schema:
                    raise SchemaMismatch(
                        f"Column {raw_name!r} is not in the data dictionary "
                        "(strict schema mode)"
                    )
                unmapped.append(raw_name)
                issues.append(unmapped_column_warning(raw_name))
                continue
            target = entry.normalized_name
            if target in columns or any(p.search(target) for p in duplicate_patterns):
                dropped_duplicates.append(raw_name)
                continue
            if target != raw_name:
                renamed += 1
            columns[target] = as_text_series(df.iloc[:, position])

        for required in config.key_columns:
            if required not in columns:
                raise SchemaMismatch(
                    f"Required column {required!r} is not present in the input data"
                )

        normalized = pd.DataFrame(columns, index=df.index)
        parts = [f"Renamed {renamed} of {normalized.shape[1]} columns"]
        if dropped_markers:
            parts.append(f"dropped {len(dropped_markers)} marker columns")
        if dropped_duplicates:
            parts.append(f"dropped {len(dropped_duplicates)} duplicate columns")
        if unmapped:
            parts.append(f"dropped {len(unmapped)} unmapped columns")

        return TransformationResult(
            data=normalized,
            applied=True,
            message=", ".join(parts),
            issues=issues,
            metadata={
                "renamed": renamed,
                "dropped_markers": dropped_markers,
                "dropped_duplicates": dropped_duplicates,
                "unmapped_columns": unmapped,
                "input_columns": df.shape[1],
                "output_columns": normalized.shape[1],
            },
        )

    @staticmethod
    def _check_required_in_schema(context: TransformationContext) -> None:
        for required in context.config.key_columns:
            if required not in context.schema:
                raise SchemaMismatch(
                    f"Required column {required!r} is not defined in the data dictionary"
                )
