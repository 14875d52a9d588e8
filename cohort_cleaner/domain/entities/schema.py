"""Variable dictionary model.

The dictionary is supplied by the study team and maps every raw export
column to a normalized, domain-prefixed name plus the metadata that drives
cleaning: which domain it belongs to, whether it is constant across visits,
and how its text should be decoded for analysis.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import pandas as pd

from ...pandas_utils import is_blank_scalar
from ..exceptions import SchemaError

if TYPE_CHECKING:
    from collections.abc import Callable


class DomainCategory(str, Enum):
    IDENTIFIER = "identifier"
    DEMOGRAPHIC = "demographic"
    COGNITIVE = "cognitive"
    MEDICAL = "medical"
    PHYSICAL = "physical"
    ADHERENCE = "adherence"
    EVENT = "event"

    @property
    def prefix(self) -> str:
        return _DOMAIN_PREFIXES[self]

    @classmethod
    def parse(cls, value: str) -> DomainCategory:
        key = value.strip().lower()
        if key in _DOMAIN_ALIASES:
            return _DOMAIN_ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            raise SchemaError(f"Unknown domain category: {value!r}") from None


_DOMAIN_PREFIXES: dict[DomainCategory, str] = {
    DomainCategory.IDENTIFIER: "id",
    DomainCategory.DEMOGRAPHIC: "demo",
    DomainCategory.COGNITIVE: "cog",
    DomainCategory.MEDICAL: "med",
    DomainCategory.PHYSICAL: "phys",
    DomainCategory.ADHERENCE: "adh",
    DomainCategory.EVENT: "ae",
}

_DOMAIN_ALIASES: dict[str, DomainCategory] = {
    **{prefix: category for category, prefix in _DOMAIN_PREFIXES.items()},
    "adverse_event": DomainCategory.EVENT,
    "adverse_events": DomainCategory.EVENT,
}


class TemporalCategory(str, Enum):
    INVARIANT = "time_invariant"
    VARYING = "time_varying"
    EVENT = "adverse_event"

    @classmethod
    def parse(cls, value: str) -> TemporalCategory:
        key = value.strip().lower()
        aliases = {
            "invariant": cls.INVARIANT,
            "varying": cls.VARYING,
            "event": cls.EVENT,
            "adverse_events": cls.EVENT,
        }
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            raise SchemaError(f"Unknown temporal category: {value!r}") from None


class ValueType(str, Enum):
    NUMERIC = "numeric"
    BINARY = "binary"
    CATEGORICAL = "categorical"
    DATE = "date"
    TEXT = "text"

    @classmethod
    def parse(cls, value: str) -> ValueType:
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise SchemaError(f"Unknown value type: {value!r}") from None


@dataclass(frozen=True, slots=True)
class SchemaEntry:
    raw_name: str
    normalized_name: str
    domain_category: DomainCategory
    temporal_category: TemporalCategory
    value_type: ValueType = ValueType.TEXT

    @property
    def is_event(self) -> bool:
        return (
            self.domain_category is DomainCategory.EVENT
            or self.temporal_category is TemporalCategory.EVENT
        )

    @property
    def is_identifier(self) -> bool:
        return self.domain_category is DomainCategory.IDENTIFIER

    @property
    def is_invariant(self) -> bool:
        return self.temporal_category is TemporalCategory.INVARIANT

    @property
    def is_varying(self) -> bool:
        return self.temporal_category is TemporalCategory.VARYING


# Accepted header spellings for each dictionary field, first match wins.
RAW_NAME_FIELDS = ("original_name", "raw_name")
NORMALIZED_NAME_FIELDS = ("new_name", "normalized_name")
DOMAIN_FIELDS = ("domain_category", "section", "domain")
TEMPORAL_FIELDS = ("variable_category", "temporal_category")
VALUE_TYPE_FIELDS = ("data_type", "value_type")


class SchemaDictionary:
    """Immutable, ordered set of :class:`SchemaEntry` loaded once per run.

    Lookups work in both directions: by raw export header (used while
    renaming) and by normalized name (used by every later stage).
    """

    def __init__(self, entries: Iterable[SchemaEntry]) -> None:
        super().__init__()
        self._entries: tuple[SchemaEntry, ...] = tuple(entries)
        self._by_raw: dict[str, SchemaEntry] = {}
        self._by_normalized: dict[str, SchemaEntry] = {}
        self._by_stripped: dict[str, SchemaEntry] = {}
        for entry in self._entries:
            existing = self._by_raw.get(entry.raw_name)
            if existing is not None and existing != entry:
                raise SchemaError(
                    f"Raw column {entry.raw_name!r} is mapped twice: "
                    f"{existing.normalized_name!r} and {entry.normalized_name!r}"
                )
            self._by_raw.setdefault(entry.raw_name, entry)
            self._by_stripped.setdefault(entry.raw_name.strip(), entry)
            # Several raw columns may share a normalized name; the first defines it.
            self._by_normalized.setdefault(entry.normalized_name, entry)

    @classmethod
    def from_entries(cls, entries: Iterable[SchemaEntry]) -> SchemaDictionary:
        return cls(entries)

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        *,
        classify: Callable[[str], DomainCategory] | None = None,
    ) -> SchemaDictionary:
        """Build the dictionary from a table such as ``data_dictionary.csv``.

        Args:
            frame: One row per raw column.
            classify: Derives the domain from the normalized name when the
                table has no domain field. Defaults to the classification rule table.

        Raises:
            SchemaError: A required field is missing or a value is invalid.
        """
        columns = [str(c).strip() for c in frame.columns]
        raw_field = _require_field(columns, RAW_NAME_FIELDS, "original name")
        normalized_field = _require_field(
            columns, NORMALIZED_NAME_FIELDS, "normalized name"
        )
        temporal_field = _require_field(columns, TEMPORAL_FIELDS, "temporal category")
        domain_field = _find_field(columns, DOMAIN_FIELDS)
        value_type_field = _find_field(columns, VALUE_TYPE_FIELDS)
        if classify is None:
            from ..services.classification import classify_domain

            classify = classify_domain

        renamed = frame.copy()
        renamed.columns = columns
        entries: list[SchemaEntry] = []
        for position, row in enumerate(renamed.to_dict(orient="records"), start=1):
            raw_name = row.get(raw_field)
            normalized = row.get(normalized_field)
            if is_blank_scalar(raw_name) or is_blank_scalar(normalized):
                raise SchemaError(
                    f"Data dictionary row {position} has an empty name field"
                )
            normalized_name = str(normalized).strip()
            temporal = row.get(temporal_field)
            if is_blank_scalar(temporal):
                raise SchemaError(
                    f"Data dictionary row {position} ({normalized_name}) "
                    "has no temporal category"
                )
            domain_value = row.get(domain_field) if domain_field else None
            domain = (
                classify(normalized_name)
                if is_blank_scalar(domain_value)
                else DomainCategory.parse(str(domain_value))
            )
            value_type_value = row.get(value_type_field) if value_type_field else None
            value_type = (
                ValueType.TEXT
                if is_blank_scalar(value_type_value)
                else ValueType.parse(str(value_type_value))
            )
            entries.append(
                SchemaEntry(
                    raw_name=str(raw_name),
                    normalized_name=normalized_name,
                    domain_category=domain,
                    temporal_category=TemporalCategory.parse(str(temporal)),
                    value_type=value_type,
                )
            )
        return cls(entries)

    def __iter__(self) -> Iterator[SchemaEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, normalized_name: object) -> bool:
        return normalized_name in self._by_normalized

    @property
    def entries(self) -> tuple[SchemaEntry, ...]:
        return self._entries

    def lookup_raw(self, raw_name: str) -> SchemaEntry | None:
        entry = self._by_raw.get(raw_name)
        if entry is None:
            entry = self._by_stripped.get(raw_name.strip())
        return entry

    def get(self, normalized_name: str) -> SchemaEntry | None:
        return self._by_normalized.get(normalized_name)

    def columns_with(
        self,
        *,
        temporal: TemporalCategory | None = None,
        value_type: ValueType | None = None,
        present_in: Sequence[str] | None = None,
    ) -> list[str]:
        """Normalized names matching the filters, in dictionary order.

        ``present_in`` restricts (and orders) the result to the given columns.
        """
        names = [
            entry.normalized_name
            for entry in self._by_normalized.values()
            if (temporal is None or entry.temporal_category is temporal)
            and (value_type is None or entry.value_type is value_type)
        ]
        if present_in is None:
            return names
        wanted = set(names)
        return [col for col in present_in if col in wanted]

    def event_columns(self, present_in: Sequence[str] | None = None) -> list[str]:
        names = [e.normalized_name for e in self._by_normalized.values() if e.is_event]
        if present_in is None:
            return names
        wanted = set(names)
        return [col for col in present_in if col in wanted]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "original_name": e.raw_name,
                    "new_name": e.normalized_name,
                    "domain_category": e.domain_category.value,
                    "variable_category": e.temporal_category.value,
                    "data_type": e.value_type.value,
                }
                for e in self._entries
            ],
            columns=[
                "original_name",
                "new_name",
                "domain_category",
                "variable_category",
                "data_type",
            ],
        )

    def __repr__(self) -> str:
        return f"SchemaDictionary({len(self._entries)} entries)"


def _find_field(columns: Sequence[str], candidates: Sequence[str]) -> str | None:
    lowered = {c.lower(): c for c in columns}
    for candidate in candidates:
        if candidate in lowered:
            return lowered[candidate]
    return None


def _require_field(columns: Sequence[str], candidates: Sequence[str], label: str) -> str:
    found = _find_field(columns, candidates)
    if found is None:
        raise SchemaError(
            f"Data dictionary lacks the {label} field "
            f"(expected one of: {', '.join(candidates)})"
        )
    return found
