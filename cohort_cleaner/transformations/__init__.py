"""Cleaning engine stages.

Each frame-to-frame stage implements :class:`TransformerPort`; the record
splitter sits between normalization and the visit-record pipeline because it
produces two frames.
"""

from .analysis import AnalysisProjector
from .base import (
    TransformationContext,
    TransformationResult,
    TransformerPort,
    is_transformer,
)
from .missingness import InvariantPropagator, MissingnessResolver
from .normalization import ColumnNormalizer
from .pipeline import TransformationPipeline
from .splitting import RecordSplitter, SplitRecords

__all__ = [
    "AnalysisProjector",
    "ColumnNormalizer",
    "InvariantPropagator",
    "MissingnessResolver",
    "RecordSplitter",
    "SplitRecords",
    "TransformationContext",
    "TransformationPipeline",
    "TransformationResult",
    "TransformerPort",
    "is_transformer",
]
