from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from jprov.core.config import Config, load_config
from jprov.core.errors import ErrorCode
from jprov.core.result import Err
from jprov.disco.client import Disco
from jprov.disco.http import HttpClient, RealHttpClient
from jprov.locators import (
    DiscoLocator,
    GradleLocator,
    JavaDirectoryLocator,
    JavaHomeLocator,
    JavaResolver,
    Searcher,
    TraceConsole,
    gradle_user_home,
    load_gradle_properties,
)
from jprov.output.console import ConsoleProtocol, RichConsole
from jprov.platform.detection import PlatformInfo, detect
from jprov.platform.paths import user_config_dir


@dataclass(frozen=True, slots=True)
class CLIContext:
    platform: PlatformInfo
    config: Config
    console: ConsoleProtocol
    http: HttpClient

    def disco(
        self,
        *,
        cache: Path | None = None,
        offline: bool = False,
        console: ConsoleProtocol | None = None,
    ) -> Disco:
        return Disco(
            cache or self.config.disco.cache,
            url=self.config.disco.url,
            offline=offline or self.config.disco.offline,
            http=self.http,
            console=console or self.console,
            platform=self.platform,
        )

    def gradle_properties(self) -> dict[str, str]:
        """``gradle.properties`` from the Gradle user home, overridden by config."""
        gradle_home = gradle_user_home(self.config.properties, os.environ)
        props = load_gradle_properties(gradle_home / "gradle.properties")
        props.update(self.config.properties)
        return props

    def resolver(self, *, cache: Path | None = None, offline: bool = False) -> JavaResolver:
        """The standard chain: env vars, Gradle, well-known directories, Disco cache."""
        disco_search = Searcher()
        disco = self.disco(cache=cache, offline=offline, console=TraceConsole(disco_search))
        return JavaResolver(
            [
                JavaHomeLocator(),
                GradleLocator(self.gradle_properties()),
                JavaDirectoryLocator(),
                DiscoLocator(disco.cache, searcher=disco_search, disco=disco),
            ]
        )


def default_config_path() -> Path:
    return user_config_dir() / "config.toml"


def build_context(config_path: Path | None = None, *, verbose: bool = False) -> CLIContext:
    console = RichConsole(stderr=True, verbose=verbose)

    config = Config()
    path = config_path or default_config_path()
    if path.exists():
        config_result = load_config(path)
        if isinstance(config_result, Err):
            typer.echo(f"error: {config_result.error.message}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        config = config_result.value
    elif config_path is not None:
        typer.echo(f"error: Config file not found: {config_path}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(
        platform=detect(),
        config=config,
        console=console,
        http=RealHttpClient(timeout=config.disco.timeout),
    )

