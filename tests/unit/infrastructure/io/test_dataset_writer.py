"""Unit tests for DatasetWriter."""

import json

import pandas as pd
import pytest

from cohort_cleaner.application.cleaning_use_case import CleanDatasetUseCase
from cohort_cleaner.application.models import CleanDatasetRequest
from cohort_cleaner.infrastructure.io import CSVReader, DatasetWriter
from cohort_cleaner.infrastructure.logging import NullLogger


@pytest.fixture
def response(raw, schema, config):
    return CleanDatasetUseCase(logger=NullLogger()).execute(
        CleanDatasetRequest(raw=raw, schema=schema, config=config)
    )


class TestDatasetWriter:
    """Tests for DatasetWriter.write."""

    def test_writes_every_file(self, response, tmp_path):
        files = DatasetWriter().write(response, tmp_path / "out")

        for path in (
            files.visits,
            files.events,
            files.summary,
            files.issues,
            files.dictionary,
            files.missingness,
        ):
            assert path.is_file()

    def test_missing_and_empty_survive_round_trip(self, response, tmp_path):
        files = DatasetWriter().write(response, tmp_path)

        visits = CSVReader().read(files.visits)
        events = CSVReader().read(files.events)

        assert visits.loc[3, "demo_education_years"] is pd.NA
        assert visits.loc[1, "cog_cognitive_score"] == ""
        assert visits.loc[0, "id_visit_date_date"] == "2023-01-15"
        assert visits.loc[0, "phys_grip_strength"] == "36/41"
        assert events["ae_fall_occurred"].tolist() == ["", "Yes", "", "", "", ""]

    def test_summary_json(self, response, tmp_path):
        files = DatasetWriter().write(response, tmp_path)

        data = json.loads(files.summary.read_text(encoding="utf-8"))

        assert data["unique_patients"] == 2
        assert data["fill_counts"] == {"demo_education_years": 2, "demo_dominant_hand": 4}
        assert data["issue_counts"]["ParseWarning"] == 2

    def test_issues_file(self, response, tmp_path):
        files = DatasetWriter().write(response, tmp_path)

        issues = pd.read_csv(files.issues, dtype=str, keep_default_na=False)

        assert issues["kind"].tolist() == [
            "UnmappedColumnWarning",
            "ParseWarning",
            "ParseWarning",
        ]

    def test_output_is_deterministic(self, response, tmp_path):
        first = DatasetWriter().write(response, tmp_path / "a")
        second = DatasetWriter().write(response, tmp_path / "b")

        assert first.visits.read_bytes() == second.visits.read_bytes()
        assert first.events.read_bytes() == second.events.read_bytes()
