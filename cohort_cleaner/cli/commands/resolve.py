from pathlib import Path
from typing import cast

import click
from rich.console import Console
from rich.table import Table

from ...config import ConfigLoader
from ...domain.exceptions import CleaningError
from ...domain.services.column_resolver import (
    Preference,
    expected_visit_columns,
    get_analysis_columns,
)
from ...infrastructure.io import CleanerInfrastructureError, CSVReader, load_schema

console = Console()


@click.command()
@click.argument("names", nargs=-1, required=True)
@click.option(
    "--dictionary",
    "dictionary",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Variable dictionary CSV",
)
@click.option(
    "--data",
    "data_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Cleaned visits CSV to resolve against (default: columns implied by the dictionary)",
)
@click.option(
    "--prefer",
    type=click.Choice(["auto", "numeric", "factor", "date"]),
    default="auto",
    show_default=True,
    help="Analysis column kind to try first",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a cohort_cleaner.toml config file",
)
def resolve_command(
    names: tuple[str, ...],
    dictionary: Path,
    data_file: Path | None,
    prefer: str,
    config_file: Path | None,
) -> None:
    """Show which cleaned column analysis code should read for each NAME."""
    config = ConfigLoader.load(config_file=config_file)
    try:
        schema = load_schema(dictionary)
        if data_file is not None:
            columns = [str(c) for c in CSVReader().read(data_file).columns]
        else:
            columns = expected_visit_columns(schema, config)
    except (CleaningError, CleanerInfrastructureError) as e:
        raise click.ClickException(f"{type(e).__name__}: {e}") from e

    resolution = get_analysis_columns(
        names, schema, columns, prefer=cast("Preference", prefer), config=config
    )
    table = Table(title="Analysis Columns")
    table.add_column("Variable", style="cyan")
    table.add_column("Column")
    for name in names:
        actual = resolution.resolved.get(name)
        table.add_row(name, actual if actual else "[red]not found[/red]")
    console.print(table)

    if not resolution.complete:
        raise click.ClickException(
            f"Unresolved variables: {', '.join(resolution.missing)}"
        )
