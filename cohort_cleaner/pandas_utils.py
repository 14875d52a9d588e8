from __future__ import annotations

from typing import Any, cast

import pandas as pd

from .constants import MissingValues


def ensure_series(value: object, index: pd.Index[Any] | None = None) -> pd.Series[Any]:
    if isinstance(value, pd.Series):
        return cast("pd.Series[Any]", value)
    if isinstance(value, pd.DataFrame):
        if value.shape[1] == 0:
            return pd.Series(index=value.index, dtype="object")
        return value.iloc[:, 0]
    return pd.Series(cast("Any", value), index=index)


def is_missing_scalar(value: object) -> bool:
    try:
        return cast("bool", pd.isna(cast("Any", value)))
    except (TypeError, ValueError):
        return False


def is_blank_scalar(value: object) -> bool:
    if value is None or is_missing_scalar(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def as_text_series(value: object) -> pd.Series[Any]:
    """Return ``value`` as a nullable ``string`` series.

    ``""`` and ``<NA>`` stay distinct, which is what the missingness logic
    relies on.
    """
    series = ensure_series(value)
    if isinstance(series.dtype, pd.StringDtype):
        return series
    return series.astype("string")


def empty_mask(series: pd.Series[Any]) -> pd.Series[bool]:
    """Cells holding an empty string (visit-scoped absence)."""
    text = as_text_series(series)
    return text.eq("").fillna(False).astype(bool)


def blank_mask(series: pd.Series[Any]) -> pd.Series[bool]:
    """Cells that are either missing or an empty string."""
    text = as_text_series(series)
    return text.isna() | text.eq("").fillna(False).astype(bool)


def normalize_missing_strings(
    value: object, *, markers: set[str] | None = None
) -> pd.Series[Any]:
    """Turn textual missing markers (``NA``, ``NULL``...) into ``pd.NA``.

    Empty strings are left alone.
    """
    series = as_text_series(value)
    marker_set = {m.upper() for m in markers or MissingValues.STRING_MARKERS}
    upper = series.str.strip().str.upper()
    marker_mask = upper.isin(marker_set).fillna(False).astype(bool)
    return series.mask(marker_mask, pd.NA)
