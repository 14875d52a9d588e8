from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

from ...domain.entities.schema import SchemaDictionary
from .exceptions import DataParseError, DataSourceNotFoundError

if TYPE_CHECKING:
    from pathlib import Path


def load_schema(path: Path, *, encoding: str = "utf-8") -> SchemaDictionary:
    """Load the variable dictionary CSV.

    Raises:
        DataSourceNotFoundError: The file does not exist.
        DataParseError: The file is not readable CSV.
        SchemaError: The table lacks required fields or holds invalid values.
    """
    if not path.is_file():
        raise DataSourceNotFoundError(f"Data dictionary not found: {path}")
    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False, encoding=encoding)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataParseError(f"Failed to read data dictionary {path}: {e}") from e
    return SchemaDictionary.from_frame(frame)
