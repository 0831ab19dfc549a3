"""Find command - resolve a Java home for a major version."""

from __future__ import annotations

import os
from pathlib import Path

import typer

from jprov.cli.context import build_context
from jprov.core.errors import ErrorCode
from jprov.core.result import Err, Ok
from jprov.output.console import Style


def find(
    version: int = typer.Option(..., "--version", help="Major Java version (e.g. 17)"),
    cache: Path | None = typer.Option(
        None, "--cache", help="Disco cache directory", show_default=False
    ),
    offline: bool = typer.Option(False, "--offline", help="Never contact the catalog"),
    config: Path | None = typer.Option(
        None, "--config", help="Config file (default: user config dir)", show_default=False
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug output"),
) -> None:
    """Print the home of a Java install, downloading one if needed.

    Only the path goes to stdout, so the output can be assigned to JAVA_HOME.
    """
    ctx = build_context(config, verbose=verbose)
    if version < 1:
        ctx.console.error(f"Invalid java version: {version}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    match ctx.resolver(cache=cache, offline=offline).find(version):
        case Ok(home):
            typer.echo(f"{home.absolute()}{os.sep}")
        case Err(failure):
            report = failure.report()
            ctx.console.error(report[0])
            for line in report[1:]:
                ctx.console.print(line, Style.DIM)
            raise typer.Exit(code=int(ErrorCode.NOT_FOUND))
