from __future__ import annotations

from typing import TYPE_CHECKING

from ..domain.services.summary import build_run_summary
from ..transformations.analysis import AnalysisProjector
from ..transformations.base import TransformationContext
from ..transformations.missingness import InvariantPropagator, MissingnessResolver
from ..transformations.normalization import ColumnNormalizer
from ..transformations.pipeline import TransformationPipeline
from ..transformations.splitting import RecordSplitter
from .models import CleanDatasetResponse

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..domain.entities.issues import DataQualityIssue
    from .models import CleanDatasetRequest
    from .ports.services import LoggerPort


def build_visit_pipeline() -> TransformationPipeline:
    """Stages applied to visit records, in the only valid order."""
    return (
        TransformationPipeline()
        .add_transformer(MissingnessResolver())
        .add_transformer(InvariantPropagator())
        .add_transformer(AnalysisProjector())
    )


class CleanDatasetUseCase:
    """Clean one raw export end to end.

    Normalize headers, split visit and event records, then run the visit
    pipeline. Fatal :class:`~cohort_cleaner.domain.exceptions.CleaningError`
    subclasses propagate; nothing is returned for a failed run.

    Example:
        >>> use_case = CleanDatasetUseCase(logger=NullLogger())
        >>> response = use_case.execute(CleanDatasetRequest(raw=raw, schema=schema))
        >>> response.summary.unique_patients
        2
    """

    def __init__(self, logger: LoggerPort) -> None:
        super().__init__()
        self.logger = logger
        self._normalizer = ColumnNormalizer()
        self._splitter = RecordSplitter()

    def execute(self, request: CleanDatasetRequest) -> CleanDatasetResponse:
        raw = request.raw.copy()
        if not raw.index.is_unique:
            raw = raw.reset_index(drop=True)
        context = TransformationContext(
            schema=request.schema,
            config=request.config,
            source_file=request.source_file,
        )
        issues: list[DataQualityIssue] = []

        self.logger.log_step_start(self._normalizer.name, len(raw), raw.shape[1])
        normalized = self._normalizer.transform(raw, context)
        self._record_issues(issues, normalized.issues)
        self.logger.log_step_complete(self._normalizer.name, normalized.message)

        frame = normalized.data
        self.logger.log_step_start(self._splitter.name, len(frame), frame.shape[1])
        split = self._splitter.split(frame, context)
        self._record_issues(issues, split.issues)
        self.logger.log_step_complete(
            self._splitter.name,
            f"{split.visits.shape[1]} visit columns, "
            f"{len(split.event_columns)} event columns",
        )

        pipeline = build_visit_pipeline()
        visits = split.visits
        self.logger.log_step_start("VisitPipeline", len(visits), visits.shape[1])
        result = pipeline.execute(visits, context)
        self._record_issues(issues, result.issues)
        for stage in result.metadata.get("applied_transformers", []):
            self.logger.log_step_complete(stage["name"], stage["message"])

        resolver_meta = pipeline.stage_metadata(result, MissingnessResolver.name)
        propagator_meta = pipeline.stage_metadata(result, InvariantPropagator.name)
        projector_meta = pipeline.stage_metadata(result, AnalysisProjector.name)

        summary = build_run_summary(
            raw=raw,
            visits=result.data,
            events=split.events,
            schema=request.schema,
            config=request.config,
            conversion_counts=resolver_meta.get("conversion_counts", {}),
            fill_counts=propagator_meta.get("fill_counts", {}),
            analysis_columns=projector_meta.get("analysis_columns", []),
            issues=issues,
        )
        self.logger.log_run_summary(summary)

        return CleanDatasetResponse(
            visits=result.data,
            events=split.events,
            summary=summary,
            schema=request.schema,
            config=request.config,
            issues=issues,
        )

    def _record_issues(
        self, issues: list[DataQualityIssue], new: Iterable[DataQualityIssue]
    ) -> None:
        for issue in new:
            issues.append(issue)
            self.logger.log_issue(issue)

