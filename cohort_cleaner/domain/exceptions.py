"""Fatal errors raised by the cleaning engine.

Any of these aborts the whole run; no partially cleaned output is returned.
Non-fatal data-quality findings are collected as issues instead (see
``cohort_cleaner.domain.entities.issues``).
"""


class CleaningError(Exception):
    pass


class SchemaError(CleaningError):
    """The variable dictionary is unusable (missing fields, bad values)."""


class SchemaMismatch(SchemaError):
    """A column required downstream is absent from the dictionary or the data."""


class MissingIdentifierError(CleaningError):
    """The patient or visit key is absent or blank."""


class DuplicateVisitError(MissingIdentifierError):
    """The same (patient, visit) key appears on more than one row."""
