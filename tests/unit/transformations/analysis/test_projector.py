"""Unit tests for AnalysisProjector."""

import pandas as pd
import pytest

from cohort_cleaner.domain.entities.issues import IssueKind
from cohort_cleaner.domain.exceptions import SchemaMismatch
from cohort_cleaner.transformations.analysis import AnalysisProjector
from cohort_cleaner.transformations.base import TransformationContext


@pytest.fixture
def context(schema, config):
    return TransformationContext(schema, config)


def _visits():
    return pd.DataFrame(
        {
            "id_client_id": ["P1", "P1", "P1"],
            "id_visit_no": ["1", "2", "3"],
            "cog_cognitive_score": ["29", "", "abc"],
            "demo_education_years": ["16", "16", "16"],
            "phys_gait_aid": ["Walker", "", pd.NA],
        },
        dtype="string",
    )


class TestAnalysisProjector:
    """Tests for AnalysisProjector."""

    def test_projection_follows_source(self, context):
        result = AnalysisProjector().transform(_visits(), context)

        assert list(result.data.columns) == [
            "id_client_id",
            "id_visit_no",
            "cog_cognitive_score",
            "cog_cognitive_score_numeric",
            "demo_education_years",
            "phys_gait_aid",
            "phys_gait_aid_factor",
        ]
        assert result.metadata["analysis_columns"] == [
            "cog_cognitive_score_numeric",
            "phys_gait_aid_factor",
        ]
        assert result.metadata["columns_by_type"] == {"numeric": 1, "categorical": 1}

    def test_original_column_untouched(self, context):
        visits = _visits()

        result = AnalysisProjector().transform(visits, context)

        pd.testing.assert_series_equal(
            result.data["cog_cognitive_score"], visits["cog_cognitive_score"]
        )
        assert result.data["cog_cognitive_score"].tolist()[:2] == ["29", ""]

    def test_visit_scoped_empty_is_missing_in_projection(self, context):
        result = AnalysisProjector().transform(_visits(), context)
        numeric = result.data["cog_cognitive_score_numeric"]

        assert numeric.iloc[0] == 29.0
        assert pd.isna(numeric.iloc[1])

    def test_parse_failures_are_reported(self, context):
        result = AnalysisProjector().transform(_visits(), context)

        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.kind is IssueKind.PARSE
        assert issue.column == "cog_cognitive_score"
        assert issue.row == 2
        assert issue.values == ("abc",)
        assert result.metadata["parse_failures"] == 1

    def test_invariant_columns_not_projected(self, context):
        result = AnalysisProjector().transform(_visits(), context)

        assert "demo_education_years_numeric" not in result.data.columns

    def test_collision_is_fatal(self, context):
        visits = _visits()
        visits["cog_cognitive_score_numeric"] = "1"

        with pytest.raises(SchemaMismatch, match="collides"):
            AnalysisProjector().transform(visits, context)

    def test_nothing_to_project(self, context):
        frame = pd.DataFrame({"id_client_id": ["P1"]})

        assert not AnalysisProjector().can_transform(frame, context)
