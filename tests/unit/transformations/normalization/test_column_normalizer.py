"""Unit tests for ColumnNormalizer."""

from dataclasses import replace

import pandas as pd
import pytest

from cohort_cleaner.domain.entities.issues import IssueKind
from cohort_cleaner.domain.entities.schema import (
    DomainCategory,
    SchemaDictionary,
    SchemaEntry,
    TemporalCategory,
)
from cohort_cleaner.domain.exceptions import SchemaMismatch
from cohort_cleaner.transformations.base import TransformationContext
from cohort_cleaner.transformations.normalization import ColumnNormalizer


def _key_entries():
    return [
        SchemaEntry("Client ID", "id_client_id", DomainCategory.IDENTIFIER, TemporalCategory.INVARIANT),
        SchemaEntry("Visit No", "id_visit_no", DomainCategory.IDENTIFIER, TemporalCategory.VARYING),
    ]


class TestColumnNormalizer:
    """Tests for ColumnNormalizer."""

    def test_renames_and_drops(self, raw, schema, config):
        """Test renaming, marker removal and unmapped column handling."""
        result = ColumnNormalizer().transform(raw, TransformationContext(schema, config))

        assert list(result.data.columns) == [
            "id_client_id",
            "id_visit_no",
            "id_visit_date",
            "demo_education_years",
            "cog_cognitive_score",
            "phys_grip_strength",
            "demo_dominant_hand",
            "phys_gait_aid",
            "ae_fall_occurred",
        ]
        assert result.metadata["dropped_markers"] == ["Personal Information FINAL"]
        assert result.metadata["unmapped_columns"] == ["Internal notes"]
        assert [i.kind for i in result.issues] == [IssueKind.UNMAPPED_COLUMN]

    def test_values_untouched(self, raw, schema, config):
        """Test that cells keep their text and the empty/missing distinction."""
        result = ColumnNormalizer().transform(raw, TransformationContext(schema, config))
        data = result.data

        assert data["cog_cognitive_score"].tolist()[:3] == ["29", "", ""]
        assert data.loc[3, "phys_gait_aid"] is pd.NA
        assert data.loc[4, "phys_gait_aid"] == ""
        assert all(isinstance(data[c].dtype, pd.StringDtype) for c in data.columns)
        assert data.index.equals(raw.index)

    def test_strict_mode_rejects_unmapped(self, raw, schema, config):
        """Test that strict schema mode fails on unmapped columns."""
        context = TransformationContext(schema, replace(config, strict_schema=True))

        with pytest.raises(SchemaMismatch, match="Internal notes"):
            ColumnNormalizer().transform(raw, context)

    def test_first_occurrence_wins(self, config):
        """Test that only the first raw column per normalized name is kept."""
        schema = SchemaDictionary(
            [
                *_key_entries(),
                SchemaEntry("DOB", "demo_dob", DomainCategory.DEMOGRAPHIC, TemporalCategory.INVARIANT),
                SchemaEntry("DOB again", "demo_dob", DomainCategory.DEMOGRAPHIC, TemporalCategory.INVARIANT),
            ]
        )
        raw = pd.DataFrame(
            [["P1", "1", "1950-01-01", "1951-01-01"]],
            columns=["Client ID", "Visit No", "DOB", "DOB again"],
        )

        result = ColumnNormalizer().transform(raw, TransformationContext(schema, config))

        assert result.data["demo_dob"].tolist() == ["1950-01-01"]
        assert result.metadata["dropped_duplicates"] == ["DOB again"]

    def test_repeated_raw_header(self, config):
        """Test that a header repeated in the export keeps its first column."""
        schema = SchemaDictionary(_key_entries())
        raw = pd.DataFrame([["P1", "1", "P9"]], columns=["Client ID", "Visit No", "Client ID"])

        result = ColumnNormalizer().transform(raw, TransformationContext(schema, config))

        assert list(result.data.columns) == ["id_client_id", "id_visit_no"]
        assert result.data["id_client_id"].tolist() == ["P1"]

    def test_duplicate_pattern_columns_dropped(self, config):
        """Test that versioned copies of identifier fields are dropped."""
        schema = SchemaDictionary(
            [
                *_key_entries(),
                SchemaEntry(
                    "Study number",
                    "demo_participants_study_number",
                    DomainCategory.DEMOGRAPHIC,
                    TemporalCategory.INVARIANT,
                ),
                SchemaEntry(
                    "Study number (2)",
                    "demo_participants_study_number_v2",
                    DomainCategory.DEMOGRAPHIC,
                    TemporalCategory.INVARIANT,
                ),
            ]
        )
        raw = pd.DataFrame(
            [["P1", "1", "S-1", "S-1"]],
            columns=["Client ID", "Visit No", "Study number", "Study number (2)"],
        )

        result = ColumnNormalizer().transform(raw, TransformationContext(schema, config))

        assert "demo_participants_study_number" in result.data.columns
        assert "demo_participants_study_number_v2" not in result.data.columns

    def test_key_missing_from_dictionary(self, config):
        """Test that the dictionary must define the key columns."""
        schema = SchemaDictionary(_key_entries()[:1])
        raw = pd.DataFrame([["P1"]], columns=["Client ID"])

        with pytest.raises(SchemaMismatch, match="id_visit_no"):
            ColumnNormalizer().transform(raw, TransformationContext(schema, config))

    def test_key_missing_from_input(self, config):
        """Test that the export must carry the key columns."""
        schema = SchemaDictionary(_key_entries())
        raw = pd.DataFrame([["P1"]], columns=["Client ID"])

        with pytest.raises(SchemaMismatch, match="not present in the input"):
            ColumnNormalizer().transform(raw, TransformationContext(schema, config))
