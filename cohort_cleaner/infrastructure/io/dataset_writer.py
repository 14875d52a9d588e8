from __future__ import annotations

from dataclasses import dataclass
import json
from typing import TYPE_CHECKING

import pandas as pd

from ...constants import Defaults
from .exceptions import DataWriteError

if TYPE_CHECKING:
    from pathlib import Path

    from ...application.models import CleanDatasetResponse

VISITS_FILE = "visits_data.csv"
EVENTS_FILE = "adverse_events_data.csv"
SUMMARY_FILE = "summary.json"
ISSUES_FILE = "data_quality_issues.csv"
DICTIONARY_FILE = "data_dictionary_cleaned.csv"
MISSINGNESS_FILE = "patient_missingness.csv"


@dataclass(frozen=True, slots=True)
class WrittenFiles:
    visits: Path
    events: Path
    summary: Path
    issues: Path
    dictionary: Path
    missingness: Path


class DatasetWriter:
    """Write a cleaning response to ``output_dir``.

    True-missing cells are written as ``NA`` and visit-scoped empty cells as
    an empty field, so the distinction survives a round trip through
    :class:`~cohort_cleaner.infrastructure.io.csv_reader.CSVReader`.
    """

    def __init__(self, missing_marker: str = Defaults.MISSING_MARKER) -> None:
        super().__init__()
        self.missing_marker = missing_marker

    def write(self, response: CleanDatasetResponse, output_dir: Path) -> WrittenFiles:
        files = WrittenFiles(
            visits=output_dir / VISITS_FILE,
            events=output_dir / EVENTS_FILE,
            summary=output_dir / SUMMARY_FILE,
            issues=output_dir / ISSUES_FILE,
            dictionary=output_dir / DICTIONARY_FILE,
            missingness=output_dir / MISSINGNESS_FILE,
        )
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            self._write_frame(response.visits, files.visits)
            self._write_frame(response.events, files.events)
            self._write_frame(self._issues_frame(response), files.issues)
            self._write_frame(response.schema.to_frame(), files.dictionary)
            self._write_frame(response.patient_missingness(), files.missingness)
            files.summary.write_text(
                json.dumps(response.summary.to_dict(), indent=2, default=str) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            raise DataWriteError(f"Failed to write output to {output_dir}: {e}") from e
        return files

    def _write_frame(self, frame: pd.DataFrame, path: Path) -> None:
        frame.to_csv(path, index=False, na_rep=self.missing_marker, date_format="%Y-%m-%d")

    @staticmethod
    def _issues_frame(response: CleanDatasetResponse) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "kind": issue.kind.value,
                    "column": issue.column,
                    "patient_id": issue.patient_id,
                    "row": issue.row,
                    "values": "; ".join(issue.values),
                    "message": issue.message,
                }
                for issue in response.issues
            ],
            columns=["kind", "column", "patient_id", "row", "values", "message"],
        )
