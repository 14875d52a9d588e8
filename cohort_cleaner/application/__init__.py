"""Application layer for the cohort cleaner.

Use cases orchestrate the engine stages; ports define what the application
needs from infrastructure (currently only logging).
"""

from .models import CleanDatasetRequest, CleanDatasetResponse

# Import CleanDatasetUseCase from .cleaning_use_case directly; it pulls in the
# whole transformation package.

__all__ = [
    "CleanDatasetRequest",
    "CleanDatasetResponse",
]
