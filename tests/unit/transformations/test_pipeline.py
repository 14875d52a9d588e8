"""Unit tests for transformation pipeline.

Tests for TransformationPipeline class.
"""

import pandas as pd
import pytest

from cohort_cleaner.domain.entities.issues import unmapped_column_warning
from cohort_cleaner.domain.exceptions import CleaningError
from cohort_cleaner.transformations import (
    InvariantPropagator,
    MissingnessResolver,
    TransformationContext,
    TransformationPipeline,
    TransformationResult,
)


class MockTransformer:
    """Mock transformer for testing."""

    def __init__(
        self,
        name: str,
        applies: bool = True,
        requires: tuple[str, ...] = (),
        fails: bool = False,
        issue_column: str | None = None,
    ):
        self.name = name
        self.requires = requires
        self.applies = applies
        self.fails = fails
        self.issue_column = issue_column
        self.call_count = 0

    def can_transform(self, df: pd.DataFrame, context: TransformationContext) -> bool:
        """Check if transformer applies."""
        return self.applies

    def transform(
        self, df: pd.DataFrame, context: TransformationContext
    ) -> TransformationResult:
        """Append a marker column."""
        self.call_count += 1
        if self.fails:
            raise CleaningError(f"{self.name} failed")
        new_df = df.copy()
        new_df[self.name] = 1
        result = TransformationResult(
            data=new_df, message=f"{self.name} applied", metadata={"stage": self.name}
        )
        if self.issue_column:
            result.add_issue(unmapped_column_warning(self.issue_column))
        return result


@pytest.fixture
def frame():
    return pd.DataFrame({"id_client_id": ["P1", "P2"]})


@pytest.fixture
def context(schema):
    return TransformationContext(schema=schema)


class TestTransformationPipeline:
    """Tests for TransformationPipeline class."""

    def test_initialization(self):
        """Test pipeline initialization."""
        pipeline = TransformationPipeline()

        assert len(pipeline) == 0
        assert repr(pipeline) == "TransformationPipeline([])"

    def test_empty_pipeline(self, frame, context):
        """Test executing an empty pipeline."""
        result = TransformationPipeline().execute(frame, context)

        assert not result.applied
        assert result.data is frame
        assert "empty" in result.message

    def test_stages_run_in_order(self, frame, context):
        """Test that each stage consumes the previous output."""
        pipeline = (
            TransformationPipeline()
            .add_transformer(MockTransformer("first"))
            .add_transformer(MockTransformer("second", requires=("first",)))
        )

        result = pipeline.execute(frame, context)

        assert list(result.data.columns) == ["id_client_id", "first", "second"]
        assert result.message == "Applied 2 transformers: first, second"
        names = [t["name"] for t in result.metadata["applied_transformers"]]
        assert names == ["first", "second"]

    def test_skipped_stage(self, frame, context):
        """Test that inapplicable stages are skipped and recorded."""
        skipped = MockTransformer("skipped", applies=False)
        pipeline = TransformationPipeline().add_transformer(skipped)

        result = pipeline.execute(frame, context)

        assert not result.applied
        assert skipped.call_count == 0
        assert result.metadata["skipped_transformers"] == ["skipped"]

    def test_issues_are_collected_in_stage_order(self, frame, context):
        """Test that non-fatal issues from every stage are returned."""
        pipeline = (
            TransformationPipeline()
            .add_transformer(MockTransformer("a", issue_column="x"))
            .add_transformer(MockTransformer("b", issue_column="y"))
        )

        result = pipeline.execute(frame, context)

        assert [i.column for i in result.issues] == ["x", "y"]

    def test_fatal_error_propagates(self, frame, context):
        """Test that a fatal error stops the run without partial output."""
        after = MockTransformer("after")
        pipeline = (
            TransformationPipeline()
            .add_transformer(MockTransformer("broken", fails=True))
            .add_transformer(after)
        )

        with pytest.raises(CleaningError, match="broken failed"):
            pipeline.execute(frame, context)
        assert after.call_count == 0

    def test_requires_enforces_order(self):
        """Test that a stage cannot be added before its prerequisites."""
        pipeline = TransformationPipeline()

        with pytest.raises(ValueError, match="must run after MissingnessResolver"):
            pipeline.add_transformer(InvariantPropagator())

        pipeline.add_transformer(MissingnessResolver()).add_transformer(
            InvariantPropagator()
        )
        assert len(pipeline) == 2

    def test_stage_metadata(self, frame, context):
        """Test lookup of one stage's metadata."""
        pipeline = TransformationPipeline().add_transformer(MockTransformer("a"))

        result = pipeline.execute(frame, context)

        assert pipeline.stage_metadata(result, "a") == {"stage": "a"}
        assert pipeline.stage_metadata(result, "missing") == {}

    def test_clear(self):
        """Test clearing the pipeline."""
        pipeline = TransformationPipeline().add_transformer(MockTransformer("a"))
        pipeline.clear()

        assert len(pipeline) == 0
