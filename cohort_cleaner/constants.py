from typing import ClassVar


class Defaults:
    PATIENT_ID_COLUMN = "id_client_id"
    VISIT_NUMBER_COLUMN = "id_visit_no"
    VISIT_DATE_COLUMN = "id_visit_date"
    MIN_VISIT_NUMBER = 0
    MAX_VISIT_NUMBER = 3
    CONFIG_FILE = "cohort_cleaner.toml"
    MISSING_MARKER = "NA"


class Suffixes:
    NUMERIC = "_numeric"
    FACTOR = "_factor"
    DATE = "_date"


class SectionMarkers:
    # Export artifacts with no data in them.
    COLUMNS: ClassVar[tuple[str, ...]] = (
        "Personal Information FINAL",
        "Physician evaluation FINAL",
        "Physical Health Agility FINAL",
        "Cognitive Health Agility- Final",
        "Adverse events FINAL",
        "Body composition FINAL",
    )


class DuplicatePatterns:
    # Repeated identifier fields across form sections; the first occurrence wins.
    PATTERNS: ClassVar[tuple[str, ...]] = (
        r"^demo_participants_study_number_v[2-9]$",
        r"^demo_date_of_birth.*_v[2-9]$",
    )


class DateFormats:
    # Year-month-day, then day-month-year, then month-day-year.
    FORMATS: ClassVar[tuple[str, ...]] = (
        "%Y-%m-%d",
        "%Y/%m/%d",
        "%d/%m/%Y",
        "%d-%m-%Y",
        "%d.%m.%Y",
        "%m/%d/%Y",
        "%m-%d-%Y",
    )


class LogLevels:
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2


class MissingValues:
    STRING_MARKERS: ClassVar[frozenset[str]] = frozenset(
        {"NA", "<NA>", "NAN", "NULL"}
    )
