"""File collaborators around the cleaning engine."""

from .csv_reader import CSVReader, CSVReadOptions
from .dataset_writer import DatasetWriter, WrittenFiles
from .dictionary_loader import load_schema
from .exceptions import (
    CleanerInfrastructureError,
    DataParseError,
    DataSourceError,
    DataSourceNotFoundError,
    DataWriteError,
)

__all__ = [
    "CSVReadOptions",
    "CSVReader",
    "CleanerInfrastructureError",
    "DataParseError",
    "DataSourceError",
    "DataSourceNotFoundError",
    "DataWriteError",
    "DatasetWriter",
    "WrittenFiles",
    "load_schema",
]
