"""Download command - pick a package from the catalog and unpack it."""

from __future__ import annotations

from pathlib import Path

import typer

from jprov.cli.context import CLIContext, build_context
from jprov.core.errors import ErrorCode
from jprov.core.result import Err
from jprov.disco.model import Package
from jprov.java import probe
from jprov.output.console import Style
from jprov.output.errors import disco_error_exit_code, print_disco_error
from jprov.platform.detection import OS, Arch
from jprov.platform.distro import Distro


def _resolve_arch(ctx: CLIContext, name: str | None) -> Arch:
    if name is None:
        return ctx.platform.arch
    arch = Arch.from_name(name)
    if arch == Arch.UNKNOWN:
        ctx.console.warning(f"Unknown arch {name}, defaulting to {Arch.X64.key}")
        return Arch.X64
    return arch


def _resolve_os(ctx: CLIContext, name: str | None) -> OS:
    if name is None:
        return ctx.platform.os
    os_ = OS.from_name(name)
    if os_ == OS.UNKNOWN:
        ctx.console.warning(f"Unknown os {name}, defaulting to {OS.LINUX.key}")
        return OS.LINUX
    return os_


def _resolve_distro(ctx: CLIContext, name: str | None) -> Distro | None:
    if name is None:
        return None
    distro = Distro.by_key(name.lower())
    if distro is None:
        ctx.console.error(f"Unknown distro: {name}")
        ctx.console.print(f"Available: {', '.join(d.key for d in Distro)}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    return distro


def _describe(pkg: Package) -> str:
    return f"{pkg.distribution} {pkg.java_version} {pkg.architecture} {pkg.archive_type}: {pkg.filename}"


def _choose(ctx: CLIContext, packages: list[Package], auto: bool) -> Package:
    if auto or len(packages) == 1:
        return packages[0]

    ctx.console.header(f"Found {len(packages)} packages")
    for index, pkg in enumerate(packages, start=1):
        ctx.console.print(f"  {index:>3}. {_describe(pkg)}")

    choice = typer.prompt("Select a package", type=int, default=1, err=True)
    if not 1 <= choice <= len(packages):
        ctx.console.error(f"Invalid selection: {choice}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    return packages[choice - 1]


def download(
    java_version: int = typer.Option(-1, "--java-version", help="Major version, -1 for the newest"),
    arch: str | None = typer.Option(None, "--arch", help="Architecture (default: this machine)"),
    os_name: str | None = typer.Option(None, "--os", help="Operating system (default: this machine)"),
    distro: str | None = typer.Option(None, "--distro", help="Distribution, e.g. temurin (default: any)"),
    auto: bool = typer.Option(False, "--auto", help="Take the best match without prompting"),
    cache: Path | None = typer.Option(
        None, "--cache", help="Disco cache directory", show_default=False
    ),
    offline: bool = typer.Option(False, "--offline", help="Only use what is already cached"),
    config: Path | None = typer.Option(
        None, "--config", help="Config file (default: user config dir)", show_default=False
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug output"),
) -> None:
    """Download and extract a JDK from the foojay catalog."""
    ctx = build_context(config, verbose=verbose)

    target_arch = _resolve_arch(ctx, arch)
    target_os = _resolve_os(ctx, os_name)
    target_distro = _resolve_distro(ctx, distro)

    disco = ctx.disco(cache=cache, offline=offline)
    found = disco.find_packages(java_version, os=target_os, distro=target_distro, arch=target_arch)
    if isinstance(found, Err):
        print_disco_error(found.error, ctx.console)
        raise typer.Exit(code=disco_error_exit_code(found.error))
    if not found.value:
        ctx.console.error(f"No packages found for {java_version} {target_os.key} {target_arch.key}")
        raise typer.Exit(code=int(ErrorCode.NOT_FOUND))

    pkg = _choose(ctx, found.value, auto)
    ctx.console.info(f"Selected {_describe(pkg)}")

    extracted = disco.extract(pkg)
    if isinstance(extracted, Err):
        print_disco_error(extracted.error, ctx.console)
        raise typer.Exit(code=disco_error_exit_code(extracted.error))
    home = extracted.value

    if pkg.os != ctx.platform.os or not ctx.platform.arch.accepts(pkg.arch):
        ctx.console.info(f"Not testing {home}, it was built for another platform")
    else:
        result = probe.test_jdk(home)
        if result.install is None:
            ctx.console.error(f"Downloaded JDK failed to run (exit {result.exit_code})")
            for line in result.lines:
                ctx.console.print(f"  {line}", Style.DIM)
            raise typer.Exit(code=int(ErrorCode.IO_ERROR))
        ctx.console.success(str(result.install))

    typer.echo(str(home.absolute()))
