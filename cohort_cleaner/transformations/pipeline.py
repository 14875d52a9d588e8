"""Transformation pipeline for composing and executing cleaning stages in order.

Stages run strictly sequentially; each consumes the output of the previous
one. A stage can declare the stages it depends on through ``requires`` and
the pipeline refuses to register it before them. Fatal errors raised by a
stage propagate unchanged so a run never yields half-cleaned output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .base import TransformationContext, TransformationResult, TransformerPort

if TYPE_CHECKING:
    import pandas as pd

    from ..domain.entities.issues import DataQualityIssue


class TransformationPipeline:
    """Pipeline for composing and executing transformers in sequence.

    Example:
        >>> pipeline = TransformationPipeline()
        >>> pipeline.add_transformer(MissingnessResolver()).add_transformer(
        ...     InvariantPropagator()
        ... )
        >>> result = pipeline.execute(visits, context)
        >>> result.metadata["applied_transformers"][0]["name"]
        'MissingnessResolver'
    """

    def __init__(self) -> None:
        self.transformers: list[TransformerPort] = []

    def add_transformer(self, transformer: TransformerPort) -> TransformationPipeline:
        """Add a transformer to the end of the pipeline.

        Raises:
            ValueError: A stage listed in ``transformer.requires`` has not been
                added yet.
        """
        registered = {_name(t) for t in self.transformers}
        missing = [
            req for req in getattr(transformer, "requires", ()) if req not in registered
        ]
        if missing:
            raise ValueError(
                f"{_name(transformer)} must run after {', '.join(missing)}; "
                "add those transformers first"
            )
        self.transformers.append(transformer)
        return self

    def execute(
        self, df: pd.DataFrame, context: TransformationContext
    ) -> TransformationResult:
        """Execute every applicable transformer on ``df``.

        Returns:
            TransformationResult with the final frame, all issues in stage
            order, and per-stage metadata under ``applied_transformers``.
        """
        if not self.transformers:
            return TransformationResult(
                data=df,
                applied=False,
                message="Pipeline is empty (no transformers registered)",
            )

        current_data = df
        applied_transformers: list[dict[str, Any]] = []
        skipped_transformers: list[str] = []
        all_issues: list[DataQualityIssue] = []

        for transformer in self.transformers:
            transformer_name = _name(transformer)

            if not transformer.can_transform(current_data, context):
                skipped_transformers.append(transformer_name)
                continue

            result = transformer.transform(current_data, context)
            if not result.applied:
                skipped_transformers.append(transformer_name)
                continue

            applied_transformers.append(
                {
                    "name": transformer_name,
                    "input_rows": len(current_data),
                    "output_rows": len(result.data),
                    "message": result.message,
                    "metadata": result.metadata,
                }
            )
            all_issues.extend(result.issues)
            current_data = result.data

        if not applied_transformers:
            message = "No transformers were applicable"
        elif len(applied_transformers) == 1:
            message = f"Applied 1 transformer: {applied_transformers[0]['name']}"
        else:
            names = [t["name"] for t in applied_transformers]
            message = (
                f"Applied {len(applied_transformers)} transformers: {', '.join(names)}"
            )

        return TransformationResult(
            data=current_data,
            applied=len(applied_transformers) > 0,
            message=message,
            issues=all_issues,
            metadata={
                "input_rows": len(df),
                "output_rows": len(current_data),
                "applied_transformers": applied_transformers,
                "skipped_transformers": skipped_transformers,
                "transformers_count": len(self.transformers),
            },
        )

    def stage_metadata(self, result: TransformationResult, name: str) -> dict[str, Any]:
        """Metadata reported by stage ``name`` in an executed pipeline result."""
        applied = result.metadata.get("applied_transformers", [])
        for record in applied if isinstance(applied, list) else []:
            if record["name"] == name:
                return dict(record["metadata"])
        return {}

    def clear(self) -> None:
        """Clear all transformers from the pipeline."""
        self.transformers.clear()

    def __len__(self) -> int:
        """Return the number of transformers in the pipeline."""
        return len(self.transformers)

    def __repr__(self) -> str:
        """Return string representation of the pipeline."""
        return f"TransformationPipeline({[_name(t) for t in self.transformers]})"


def _name(transformer: object) -> str:
    return str(getattr(transformer, "name", transformer.__class__.__name__))
