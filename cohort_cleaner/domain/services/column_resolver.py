"""Map dictionary variable names to the columns analysis code should read.

Time-varying variables are analysed through their projected column
(``<name>_numeric``, ``<name>_factor`` or ``<name>_date``); everything else
is read from the base column.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass, field
from typing import Literal

from ...config import CleanerConfig
from ..entities.schema import SchemaDictionary, ValueType

Preference = Literal["auto", "numeric", "factor", "date"]


def analysis_suffix(value_type: ValueType, config: CleanerConfig) -> str | None:
    if value_type is ValueType.NUMERIC:
        return config.numeric_suffix
    if value_type in (ValueType.BINARY, ValueType.CATEGORICAL):
        return config.factor_suffix
    if value_type is ValueType.DATE:
        return config.date_suffix
    return None


def resolve_column_name(
    name: str,
    schema: SchemaDictionary,
    columns: Collection[str],
    *,
    prefer: Preference = "auto",
    config: CleanerConfig | None = None,
) -> str | None:
    """Return the column holding ``name`` in a cleaned visit frame, or None."""
    config = config or CleanerConfig()
    entry = schema.get(name)
    if entry is None:
        return name if name in columns else None
    if not entry.is_varying:
        return name if name in columns else None

    by_preference = {
        "numeric": config.numeric_suffix,
        "factor": config.factor_suffix,
        "date": config.date_suffix,
    }
    if prefer == "auto":
        suffix = analysis_suffix(entry.value_type, config)
        suffixes = [suffix] if suffix else []
    else:
        first = by_preference[prefer]
        suffixes = [first, *(s for s in by_preference.values() if s != first)]

    for candidate in [*(name + s for s in suffixes), name]:
        if candidate in columns:
            return candidate
    return None


def _empty_resolved() -> dict[str, str]:
    return {}


def _empty_names() -> list[str]:
    return []


@dataclass(slots=True)
class ColumnResolution:
    resolved: dict[str, str] = field(default_factory=_empty_resolved)
    missing: list[str] = field(default_factory=_empty_names)

    @property
    def complete(self) -> bool:
        return not self.missing


def get_analysis_columns(
    names: Iterable[str],
    schema: SchemaDictionary,
    columns: Collection[str],
    *,
    prefer: Preference = "auto",
    config: CleanerConfig | None = None,
) -> ColumnResolution:
    result = ColumnResolution()
    for name in names:
        actual = resolve_column_name(
            name, schema, columns, prefer=prefer, config=config
        )
        if actual is None:
            result.missing.append(name)
        else:
            result.resolved[name] = actual
    return result


def expected_visit_columns(
    schema: SchemaDictionary, config: CleanerConfig | None = None
) -> list[str]:
    """Columns a cleaned visit frame would carry if every variable were present."""
    config = config or CleanerConfig()
    columns: list[str] = []
    for entry in schema:
        name = entry.normalized_name
        if entry.is_event or name in columns:
            continue
        columns.append(name)
        suffix = analysis_suffix(entry.value_type, config) if entry.is_varying else None
        if suffix:
            columns.append(name + suffix)
    return columns
