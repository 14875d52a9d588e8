"""Base interface for cleaning transformers.

Every engine stage that maps a frame to a frame (normalizer, missingness
resolver, invariant propagator, analysis projector) implements
:class:`TransformerPort`, so stages can be composed in a
:class:`~cohort_cleaner.transformations.pipeline.TransformationPipeline`.

Example:
    >>> class StripTransformer:
    ...     name = "StripTransformer"
    ...     requires = ()
    ...
    ...     def can_transform(self, df, context):
    ...         return not df.empty
    ...
    ...     def transform(self, df, context):
    ...         stripped = df.apply(lambda col: col.str.strip())
    ...         return TransformationResult(data=stripped, message="Stripped text")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from ..config import CleanerConfig

if TYPE_CHECKING:
    import pandas as pd

    from ..domain.entities.issues import DataQualityIssue
    from ..domain.entities.schema import SchemaDictionary


def _empty_issues() -> list[DataQualityIssue]:
    return []


def _empty_metadata() -> dict[str, object]:
    return {}


@dataclass
class TransformationContext:
    """Inputs shared by every stage of one cleaning run.

    Attributes:
        schema: Variable dictionary, immutable for the run.
        config: Column names, markers, formats and suffixes.
        source_file: Raw export the frame was read from (optional).
        metadata: Free-form values for transformer-specific data.
    """

    schema: SchemaDictionary
    config: CleanerConfig = field(default_factory=CleanerConfig)
    source_file: str | None = None
    metadata: dict[str, object] = field(default_factory=_empty_metadata)

    def with_metadata(self, **kwargs: object) -> TransformationContext:
        """Create a new context with additional metadata.

        Example:
            >>> context = TransformationContext(schema=schema)
            >>> new_context = context.with_metadata(run_id="2024-05")
        """
        new_metadata: dict[str, object] = {**self.metadata, **kwargs}
        return TransformationContext(
            schema=self.schema,
            config=self.config,
            source_file=self.source_file,
            metadata=new_metadata,
        )


@dataclass
class TransformationResult:
    """Result of a transformation operation.

    Attributes:
        data: Transformed DataFrame
        applied: Whether transformation was applied
        message: Human-readable description of what was done
        issues: Non-fatal data-quality findings raised while transforming
        metadata: Additional result metadata (e.g., per-column counts)
    """

    data: pd.DataFrame
    applied: bool = True
    message: str = ""
    issues: list[DataQualityIssue] = field(default_factory=_empty_issues)
    metadata: dict[str, object] = field(default_factory=_empty_metadata)

    @property
    def warnings(self) -> list[str]:
        return [str(issue) for issue in self.issues]

    @property
    def has_warnings(self) -> bool:
        """Whether transformation generated any data-quality issues."""
        return len(self.issues) > 0

    def add_issue(self, issue: DataQualityIssue) -> None:
        self.issues.append(issue)

    def summary(self) -> str:
        """Generate a summary string of the transformation result.

        Example:
            >>> print(result.summary())
            Transformation applied: Filled 4 values in 2 time-invariant columns
            Warnings (1): ConflictWarning: demo_dominant_hand [patient P7]: ...
        """
        lines: list[str] = []
        if self.message:
            status = "applied" if self.applied else "skipped"
            lines.append(f"Transformation {status}: {self.message}")

        if self.issues:
            lines.append(f"Warnings ({len(self.issues)}): {', '.join(self.warnings)}")

        return "\n".join(lines) if lines else "No transformation applied"


class TransformerPort(Protocol):
    """Protocol every cleaning stage implements.

    Attributes:
        name: Stage name used in logs and pipeline metadata.
        requires: Names of stages that must run earlier in the same pipeline.
    """

    name: str
    requires: tuple[str, ...]

    def can_transform(self, df: pd.DataFrame, context: TransformationContext) -> bool:
        """Whether this stage has anything to do for ``df``."""
        ...

    def transform(
        self, df: pd.DataFrame, context: TransformationContext
    ) -> TransformationResult:
        """Transform ``df`` and return the new frame with diagnostics.

        Raises:
            CleaningError: On fatal input problems. Cell-level problems are
                reported through ``TransformationResult.issues`` instead.
        """
        ...


def is_transformer(obj: object) -> bool:
    """Check if an object implements the TransformerPort protocol.

    Example:
        >>> is_transformer(MissingnessResolver())
        True
        >>> is_transformer("not a transformer")
        False
    """
    can_transform = getattr(obj, "can_transform", None)
    transform = getattr(obj, "transform", None)
    return callable(can_transform) and callable(transform)
