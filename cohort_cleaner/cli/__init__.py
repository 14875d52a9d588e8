import click

from .commands.clean import clean_command
from .commands.resolve import resolve_command


@click.group()
def app() -> None:
    pass


app.add_command(clean_command, name="clean")
app.add_command(resolve_command, name="resolve")
__all__ = ["app"]
