from .classification import DEFAULT_DOMAIN, DOMAIN_RULES, classify_domain
from .column_resolver import (
    expected_visit_columns,
    get_analysis_columns,
    resolve_column_name,
)
from .summary import RunSummary, build_run_summary, summarize_patient_missingness

__all__ = [
    "DEFAULT_DOMAIN",
    "DOMAIN_RULES",
    "RunSummary",
    "build_run_summary",
    "classify_domain",
    "expected_visit_columns",
    "get_analysis_columns",
    "resolve_column_name",
    "summarize_patient_missingness",
]
