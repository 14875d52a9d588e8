from __future__ import annotations

import csv
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pandas as pd

from ...constants import MissingValues
from ...pandas_utils import normalize_missing_strings
from .exceptions import DataParseError, DataSourceNotFoundError

if TYPE_CHECKING:
    from pathlib import Path


def _default_missing_markers() -> tuple[str, ...]:
    return tuple(sorted(MissingValues.STRING_MARKERS))


@dataclass(slots=True)
class CSVReadOptions:
    normalize_headers: bool = True
    missing_markers: tuple[str, ...] = field(default_factory=_default_missing_markers)
    encoding: str = "utf-8"


class CSVReader:
    """Read an export with every cell as text.

    Empty cells stay ``""``; only the explicit missing markers become
    ``<NA>``. Repeated header names are kept as-is instead of being mangled,
    so the normalizer can apply its first-occurrence rule.
    """

    def read(self, path: Path, options: CSVReadOptions | None = None) -> pd.DataFrame:
        if options is None:
            options = CSVReadOptions()
        if not path.exists():
            raise DataSourceNotFoundError(f"File not found: {path}")
        if not path.is_file():
            raise DataSourceNotFoundError(f"Not a file: {path}")
        try:
            header = self._read_header(path, options.encoding)
            df = pd.read_csv(
                path,
                header=0,
                dtype=str,
                keep_default_na=False,
                na_values=list(options.missing_markers),
                encoding=options.encoding,
            )
        except FileNotFoundError as e:
            raise DataSourceNotFoundError(f"File not found: {path}") from e
        except pd.errors.ParserError as e:
            raise DataParseError(f"Failed to parse CSV {path}: {e}") from e
        except pd.errors.EmptyDataError as e:
            raise DataParseError(f"CSV file is empty: {path}") from e
        except UnicodeDecodeError as e:
            raise DataParseError(
                f"Encoding error reading {path}. Try a different encoding: {e}"
            ) from e
        if df.shape[1] == 0:
            raise DataParseError(f"CSV file has no columns: {path}")
        if len(header) == df.shape[1]:
            df.columns = header
        if options.normalize_headers:
            df.columns = [str(col).strip() for col in df.columns]
        df = df.astype("string")
        markers = set(options.missing_markers)
        for position in range(df.shape[1]):
            df.isetitem(
                position, normalize_missing_strings(df.iloc[:, position], markers=markers)
            )
        return df

    @staticmethod
    def _read_header(path: Path, encoding: str) -> list[str]:
        with path.open(newline="", encoding=encoding) as handle:
            return next(csv.reader(handle), [])
