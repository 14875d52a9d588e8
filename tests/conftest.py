import os

import pandas as pd
import pytest

from cohort_cleaner.config import CleanerConfig
from cohort_cleaner.domain.entities.schema import SchemaDictionary

DICTIONARY_ROWS = [
    ("Client ID", "id_client_id", "identifier", "time_invariant", "text"),
    ("Visit No", "id_visit_no", "identifier", "time_varying", "text"),
    ("Visit date", "id_visit_date", "identifier", "time_varying", "date"),
    ("Education (years)", "demo_education_years", "demographic", "time_invariant", "numeric"),
    ("MoCA score", "cog_cognitive_score", "cognitive", "time_varying", "numeric"),
    ("Grip strength", "phys_grip_strength", "physical", "time_varying", "numeric"),
    ("Dominant hand", "demo_dominant_hand", "demographic", "time_invariant", "categorical"),
    ("Gait aid", "phys_gait_aid", "physical", "time_varying", "categorical"),
    ("Fall occurred", "ae_fall_occurred", "event", "adverse_event", "binary"),
]

RAW_COLUMNS = [
    "Client ID",
    "Visit No",
    "Visit date",
    "Personal Information FINAL",
    "Education (years)",
    "MoCA score",
    "Grip strength",
    "Dominant hand",
    "Gait aid",
    "Fall occurred",
    "Internal notes",
]

RAW_ROWS = [
    ["P1", "1", "2023-01-15", "", "16", "29", "36/41", "Right", "Walker", "", "x"],
    ["P1", "2", "15/04/2023", "", "", "", "", "", "", "Yes", ""],
    ["P1", "3", "2023-07-20", "", "", "", "30", "", "Cane", "", ""],
    ["P2", "1", "2023-02-01", "", "", "25", "", "", pd.NA, "", ""],
    ["P2", "2", "not a date", "", "", "27", "", "Left", "", "", ""],
    ["P2", "3", "2023-08-09", "", "", "abc", "", "", "", "", ""],
]


def dictionary_frame() -> pd.DataFrame:
    return pd.DataFrame(
        DICTIONARY_ROWS,
        columns=[
            "original_name",
            "new_name",
            "domain_category",
            "variable_category",
            "data_type",
        ],
    )


def raw_frame() -> pd.DataFrame:
    return pd.DataFrame(RAW_ROWS, columns=RAW_COLUMNS).astype("string")


@pytest.fixture(autouse=True)
def _isolated_cleaner_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep COHORT_* overrides from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("COHORT_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def schema() -> SchemaDictionary:
    return SchemaDictionary.from_frame(dictionary_frame())


@pytest.fixture
def raw() -> pd.DataFrame:
    return raw_frame()


@pytest.fixture
def config() -> CleanerConfig:
    return CleanerConfig()


@pytest.fixture
def dictionary_csv(tmp_path):
    path = tmp_path / "data_dictionary.csv"
    dictionary_frame().to_csv(path, index=False)
    return path


@pytest.fixture
def raw_csv(tmp_path):
    path = tmp_path / "export.csv"
    raw_frame().to_csv(path, index=False, na_rep="NA")
    return path
