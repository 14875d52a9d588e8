"""Unit tests for RecordSplitter and visit key validation."""

from dataclasses import replace

import pandas as pd
import pytest

from cohort_cleaner.domain.entities.issues import IssueKind
from cohort_cleaner.domain.exceptions import DuplicateVisitError, MissingIdentifierError
from cohort_cleaner.transformations.base import TransformationContext
from cohort_cleaner.transformations.normalization import ColumnNormalizer
from cohort_cleaner.transformations.splitting import RecordSplitter
from cohort_cleaner.transformations.splitting.record_splitter import validate_visit_keys


@pytest.fixture
def normalized(raw, schema, config):
    return ColumnNormalizer().transform(raw, TransformationContext(schema, config)).data


class TestRecordSplitter:
    """Tests for RecordSplitter.split."""

    def test_identifiers_in_both_outputs(self, normalized, schema, config):
        split = RecordSplitter().split(normalized, TransformationContext(schema, config))

        assert split.identifier_columns == ["id_client_id", "id_visit_no", "id_visit_date"]
        assert split.event_columns == ["ae_fall_occurred"]
        assert list(split.events.columns) == [
            "id_client_id",
            "id_visit_no",
            "id_visit_date",
            "ae_fall_occurred",
        ]
        assert "ae_fall_occurred" not in split.visits.columns
        assert list(split.visits.columns[:3]) == split.identifier_columns

    def test_row_counts_preserved(self, normalized, schema, config):
        split = RecordSplitter().split(normalized, TransformationContext(schema, config))

        assert len(split.visits) == len(normalized)
        assert len(split.events) == len(normalized)
        assert split.issues == []

    def test_values_unchanged(self, normalized, schema, config):
        split = RecordSplitter().split(normalized, TransformationContext(schema, config))

        assert split.events["ae_fall_occurred"].tolist() == ["", "Yes", "", "", "", ""]
        pd.testing.assert_frame_equal(
            split.visits, normalized.drop(columns=["ae_fall_occurred"])
        )


class TestValidateVisitKeys:
    """Tests for validate_visit_keys."""

    def _frame(self, patients, visits):
        return pd.DataFrame(
            {"id_client_id": patients, "id_visit_no": visits}, dtype="string"
        )

    def test_missing_key_column(self, config):
        frame = pd.DataFrame({"id_client_id": ["P1"]})

        with pytest.raises(MissingIdentifierError, match="id_visit_no"):
            validate_visit_keys(frame, config)

    def test_blank_patient_id(self, config):
        frame = self._frame(["P1", ""], ["1", "2"])

        with pytest.raises(MissingIdentifierError, match="rows: 1"):
            validate_visit_keys(frame, config)

    def test_missing_visit_number(self, config):
        frame = self._frame(["P1", "P1"], ["1", pd.NA])

        with pytest.raises(MissingIdentifierError, match="id_visit_no"):
            validate_visit_keys(frame, config)

    def test_duplicate_key_is_fatal(self, config):
        frame = self._frame(["P1", "P1", "P2"], ["1", " 1", "1"])

        with pytest.raises(DuplicateVisitError, match=r"\(P1, 1\)"):
            validate_visit_keys(frame, config)

    def test_numerically_equal_visits_are_duplicates(self, config):
        frame = self._frame(["P1", "P1", "P2"], ["1", "1.0", "1"])

        with pytest.raises(DuplicateVisitError, match=r"\(P1, 1\)"):
            validate_visit_keys(frame, config)

    def test_unparseable_visits_compared_as_text(self, config):
        frame = self._frame(["P1", "P1", "P1"], ["baseline", "Baseline", "1"])

        issues = validate_visit_keys(frame, config)

        assert [i.values for i in issues] == [("baseline",), ("Baseline",)]

    def test_duplicate_is_a_missing_identifier_error(self):
        assert issubclass(DuplicateVisitError, MissingIdentifierError)

    def test_unexpected_visit_numbers(self, config):
        frame = self._frame(["P1", "P1", "P1"], ["0", "4", "baseline"])

        issues = validate_visit_keys(frame, config)

        assert [i.kind for i in issues] == [IssueKind.UNEXPECTED_VISIT] * 2
        assert [i.values for i in issues] == [("4",), ("baseline",)]
        assert issues[0].patient_id == "P1"

    def test_visit_range_is_configurable(self, config):
        frame = self._frame(["P1"], ["6"])

        assert validate_visit_keys(frame, replace(config, max_visit_number=6)) == []
