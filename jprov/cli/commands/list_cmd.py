"""List command - every Java install the locators can see."""

from __future__ import annotations

from pathlib import Path

import typer

from jprov.cli.context import build_context


def list_installs(
    cache: Path | None = typer.Option(
        None, "--cache", help="Disco cache directory", show_default=False
    ),
    config: Path | None = typer.Option(
        None, "--config", help="Config file (default: user config dir)", show_default=False
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug output"),
) -> None:
    """List installed JDKs and JREs, best first."""
    ctx = build_context(config, verbose=verbose)

    installs = ctx.resolver(cache=cache, offline=True).find_all()
    if not installs:
        ctx.console.warning("No Java installs found")
        return

    for install in installs:
        typer.echo(str(install))
