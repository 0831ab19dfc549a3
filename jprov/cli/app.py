from __future__ import annotations

import typer

from jprov import __version__
from jprov.cli.commands.download_cmd import download
from jprov.cli.commands.find_cmd import find
from jprov.cli.commands.list_cmd import list_installs


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(find)
app.command("list")(list_installs)
app.command()(download)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_show_version,
        is_eager=True,
    ),
) -> None:
    """Find, list and provision Java installs."""


def main() -> None:
    app()
