"""Cohort cleaner package.

Cleans wide, per-visit clinical-study exports into analysis-ready visit and
adverse-event tables:

- schema-driven column normalization
- visit / adverse-event record splitting
- patient-level missingness resolution
- time-invariant value propagation
- typed analysis columns for time-varying variables
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover
    __version__ = version("cohort-cleaner")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

from cohort_cleaner.config import CleanerConfig, ConfigLoader
from cohort_cleaner.domain.entities.schema import SchemaDictionary, SchemaEntry
from cohort_cleaner.domain.exceptions import CleaningError

__all__ = [
    "CleanerConfig",
    "CleaningError",
    "ConfigLoader",
    "SchemaDictionary",
    "SchemaEntry",
    "__version__",
]
