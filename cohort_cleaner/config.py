from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
import os
from pathlib import Path
import tomllib
from typing import Any, cast
import warnings

from .constants import DateFormats, Defaults, DuplicatePatterns, SectionMarkers, Suffixes

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True, slots=True)
class CleanerConfig:
    patient_id_column: str = Defaults.PATIENT_ID_COLUMN
    visit_number_column: str = Defaults.VISIT_NUMBER_COLUMN
    visit_date_column: str = Defaults.VISIT_DATE_COLUMN
    structural_markers: tuple[str, ...] = field(
        default_factory=lambda: SectionMarkers.COLUMNS
    )
    duplicate_patterns: tuple[str, ...] = field(
        default_factory=lambda: DuplicatePatterns.PATTERNS
    )
    date_formats: tuple[str, ...] = field(default_factory=lambda: DateFormats.FORMATS)
    numeric_suffix: str = Suffixes.NUMERIC
    factor_suffix: str = Suffixes.FACTOR
    date_suffix: str = Suffixes.DATE
    min_visit_number: int = Defaults.MIN_VISIT_NUMBER
    max_visit_number: int = Defaults.MAX_VISIT_NUMBER
    strict_schema: bool = False
    lowercase_levels: bool = False

    def __post_init__(self) -> None:
        for name in ("patient_id_column", "visit_number_column"):
            if not getattr(self, name).strip():
                raise ValueError(f"{name} must not be empty")
        if self.patient_id_column == self.visit_number_column:
            raise ValueError(
                "patient_id_column and visit_number_column must differ, "
                f"both are {self.patient_id_column!r}"
            )
        if self.min_visit_number > self.max_visit_number:
            raise ValueError(
                f"min_visit_number ({self.min_visit_number}) must not exceed "
                f"max_visit_number ({self.max_visit_number})"
            )
        if not self.date_formats:
            raise ValueError("date_formats must contain at least one format")
        suffixes = (self.numeric_suffix, self.factor_suffix, self.date_suffix)
        if any(not s for s in suffixes) or len(set(suffixes)) != len(suffixes):
            raise ValueError(f"analysis suffixes must be distinct and non-empty, got {suffixes}")

    @property
    def key_columns(self) -> tuple[str, str]:
        return (self.patient_id_column, self.visit_number_column)

    @classmethod
    def from_env(cls) -> CleanerConfig:
        defaults = cls()
        return cls(
            patient_id_column=os.getenv(
                "COHORT_PATIENT_ID_COLUMN", defaults.patient_id_column
            ),
            visit_number_column=os.getenv(
                "COHORT_VISIT_NUMBER_COLUMN", defaults.visit_number_column
            ),
            visit_date_column=os.getenv(
                "COHORT_VISIT_DATE_COLUMN", defaults.visit_date_column
            ),
            min_visit_number=int(
                os.getenv("COHORT_MIN_VISIT", str(defaults.min_visit_number))
            ),
            max_visit_number=int(
                os.getenv("COHORT_MAX_VISIT", str(defaults.max_visit_number))
            ),
            strict_schema=_coerce_bool(
                os.getenv("COHORT_STRICT_SCHEMA", "false"), key="COHORT_STRICT_SCHEMA"
            ),
        )


class ConfigLoader:
    pass

    @staticmethod
    def load(config_file: Path | None = None) -> CleanerConfig:
        config = CleanerConfig.from_env()
        if config_file is None:
            config_file = Path(Defaults.CONFIG_FILE)
        if config_file.exists():
            try:
                config = ConfigLoader._load_from_toml(config_file, config)
            except Exception as e:
                warnings.warn(
                    f"Failed to load config from {config_file}: {e}", stacklevel=2
                )
        return config

    @staticmethod
    def _load_from_toml(config_file: Path, base_config: CleanerConfig) -> CleanerConfig:
        with config_file.open("rb") as handle:
            data = tomllib.load(handle)
        columns = _get_table(data, "columns")
        cleaning = _get_table(data, "cleaning")
        analysis = _get_table(data, "analysis")
        overrides: dict[str, Any] = {}
        for key in ("patient_id_column", "visit_number_column", "visit_date_column"):
            if (value := columns.get(key)) is not None:
                overrides[key] = str(value)
        for key in ("structural_markers", "duplicate_patterns"):
            if (value := cleaning.get(key)) is not None:
                overrides[key] = _coerce_str_tuple(value, key=f"cleaning.{key}")
        for key in ("min_visit_number", "max_visit_number"):
            if (value := cleaning.get(key)) is not None:
                overrides[key] = _coerce_int(value, key=f"cleaning.{key}")
        if (value := cleaning.get("strict_schema")) is not None:
            overrides["strict_schema"] = _coerce_bool(value, key="cleaning.strict_schema")
        if (value := analysis.get("date_formats")) is not None:
            overrides["date_formats"] = _coerce_str_tuple(value, key="analysis.date_formats")
        for key in ("numeric_suffix", "factor_suffix", "date_suffix"):
            if (value := analysis.get(key)) is not None:
                overrides[key] = str(value)
        if (value := analysis.get("lowercase_levels")) is not None:
            overrides["lowercase_levels"] = _coerce_bool(
                value, key="analysis.lowercase_levels"
            )
        return replace(base_config, **overrides)


def _get_table(data: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return cast("Mapping[str, object]", value)
    return {}


def _coerce_int(value: object, *, key: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an int, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        return int(value)
    raise ValueError(f"{key} must be int-like or string, got {type(value).__name__}")


def _coerce_bool(value: object, *, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"{key} must be a boolean, got {value!r}")


def _coerce_str_tuple(value: object, *, key: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in cast("list[object]", value))
    raise ValueError(f"{key} must be a string or list of strings, got {type(value).__name__}")
