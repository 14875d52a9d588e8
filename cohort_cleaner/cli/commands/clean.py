"""Clean command - turn one raw cohort export into analysis-ready tables.

A thin adapter between click and :class:`CleanDatasetUseCase`: it parses the
options, reads the inputs, runs the use case, writes the outputs and presents
the summary.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import cast

import click
from rich.console import Console

from ...application.cleaning_use_case import CleanDatasetUseCase
from ...application.models import CleanDatasetRequest
from ...config import ConfigLoader
from ...domain.exceptions import CleaningError
from ...infrastructure.io import (
    CleanerInfrastructureError,
    CSVReader,
    DatasetWriter,
    load_schema,
)
from ...infrastructure.logging import ConsoleLogger, LogLevel
from ..presenters.summary import SummaryPresenter, SummaryRequest

console = Console()


@dataclass(frozen=True)
class CleanCommandOptions:
    dictionary: Path
    output_dir: Path | None
    config_file: Path | None
    strict: bool
    verbose: int

    @classmethod
    def from_kwargs(cls, options: dict[str, object]) -> CleanCommandOptions:
        return cls(
            dictionary=cast("Path", options["dictionary"]),
            output_dir=cast("Path | None", options.get("output_dir")),
            config_file=cast("Path | None", options.get("config_file")),
            strict=cast("bool", options["strict"]),
            verbose=cast("int", options["verbose"]),
        )


@click.command()
@click.argument("raw_csv", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--dictionary",
    "dictionary",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Variable dictionary CSV mapping raw headers to normalized names",
)
@click.option(
    "-o",
    "--output-dir",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory for cleaned files (default: <raw_csv folder>/cleaned)",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a cohort_cleaner.toml config file (default: ./cohort_cleaner.toml)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on raw columns missing from the dictionary instead of dropping them",
)
@click.option(
    "-v", "--verbose", count=True, help="Increase verbosity level (e.g., -v, -vv)"
)
def clean_command(raw_csv: Path, **options: object) -> None:
    """Clean a raw cohort export.

    Writes the visit table, the adverse-event table, the cleaned dictionary,
    per-patient missingness, the data-quality issues and a JSON run summary.

    Examples:

    \b
        # Clean an export next to its dictionary
        cohort-cleaner clean export.csv --dictionary data_dictionary.csv

    \b
        # Reject unmapped columns, write somewhere else
        cohort-cleaner clean export.csv --dictionary dict.csv --strict -o out/
    """
    command_options = CleanCommandOptions.from_kwargs(dict(options))
    output_dir = command_options.output_dir or (raw_csv.parent / "cleaned")

    config = ConfigLoader.load(config_file=command_options.config_file)
    if command_options.strict:
        config = replace(config, strict_schema=True)

    logger = ConsoleLogger(console, verbosity=command_options.verbose)
    logger.set_context(source_file=raw_csv.name)

    try:
        schema = load_schema(command_options.dictionary)
        raw = CSVReader().read(raw_csv)
        use_case = CleanDatasetUseCase(logger=logger)
        response = use_case.execute(
            CleanDatasetRequest(
                raw=raw, schema=schema, config=config, source_file=str(raw_csv)
            )
        )
        files = DatasetWriter().write(response, output_dir)
    except (CleaningError, CleanerInfrastructureError) as e:
        raise click.ClickException(f"{type(e).__name__}: {e}") from e

    presenter = SummaryPresenter(console)
    presenter.present(
        SummaryRequest(
            summary=response.summary,
            issues=response.issues,
            output_dir=output_dir,
            files=files,
            show_parse_warnings=command_options.verbose >= LogLevel.VERBOSE,
        )
    )
    logger.log_final_stats()
