"""Pure decoders turning a textual visit column into a typed analysis column.

Decoders never raise on cell content: a value that cannot be decoded becomes
missing and its row label is reported in ``Decoded.failures``. Empty strings
and ``pd.NA`` both decode to missing without being reported.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pandas as pd

from ...domain.entities.schema import ValueType
from ...pandas_utils import as_text_series, blank_mask

if TYPE_CHECKING:
    from ...config import CleanerConfig


@dataclass(frozen=True, slots=True)
class Decoded:
    values: pd.Series
    failures: pd.Index
    target: str


Decoder = Callable[[pd.Series, "CleanerConfig"], Decoded]


def decode_numeric(values: pd.Series, config: CleanerConfig) -> Decoded:
    """Parse numbers; fraction notation keeps the numerator ("36/41" -> 36)."""
    _ = config
    text = as_text_series(values).str.strip()
    blank = blank_mask(text)
    head = text.str.split("/", n=1).str[0].str.strip()
    parsed = pd.to_numeric(
        head.fillna("").astype(object), errors="coerce"
    ).astype("float64")
    failed = ~blank & parsed.isna()
    return Decoded(
        values=parsed.where(~blank),
        failures=text.index[failed.to_numpy()],
        target="number",
    )


def decode_factor(values: pd.Series, config: CleanerConfig) -> Decoded:
    """Keep each recorded token as a categorical level, without recoding."""
    text = as_text_series(values).str.strip()
    blank = blank_mask(text)
    if config.lowercase_levels:
        text = text.str.lower()
    levels = text.mask(blank, pd.NA).astype("category")
    return Decoded(values=levels, failures=text.index[:0], target="category")


def decode_date(values: pd.Series, config: CleanerConfig) -> Decoded:
    """Try each configured format in order; the first successful parse wins."""
    text = as_text_series(values).str.strip()
    pending = ~blank_mask(text)
    result = pd.Series(pd.NaT, index=text.index, dtype="datetime64[ns]")
    for fmt in config.date_formats:
        if not pending.any():
            break
        candidates = text[pending].astype(object)
        parsed = pd.to_datetime(candidates, format=fmt, errors="coerce")
        matched = parsed.notna()
        if matched.any():
            rows = parsed.index[matched.to_numpy()]
            result.loc[rows] = parsed.loc[rows]
            pending.loc[rows] = False
    return Decoded(
        values=result,
        failures=text.index[pending.to_numpy()],
        target="date",
    )


DECODERS: dict[ValueType, Decoder] = {
    ValueType.NUMERIC: decode_numeric,
    ValueType.BINARY: decode_factor,
    ValueType.CATEGORICAL: decode_factor,
    ValueType.DATE: decode_date,
}
