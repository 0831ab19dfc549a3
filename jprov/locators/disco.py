"""JDKs extracted into the Disco cache, and provisioning new ones from it."""

from __future__ import annotations

from pathlib import Path

from jprov.core.result import Err
from jprov.disco.client import Disco
from jprov.java.install import JavaInstall

from .base import Searcher, TraceConsole

__all__ = ["DiscoLocator"]


class DiscoLocator:
    """Sees every extracted JDK under the cache; ``provision`` downloads one.

    The ``Disco`` client's console output goes to this locator's trace, so a
    failed provision explains itself through ``log_output()``.
    """

    name = "DiscoLocator"

    def __init__(
        self,
        cache: Path,
        *,
        url: str | None = None,
        offline: bool = False,
        searcher: Searcher | None = None,
        disco: Disco | None = None,
    ) -> None:
        self._search = searcher or Searcher()
        if disco is None:
            kwargs = {"url": url} if url else {}
            disco = Disco(cache, offline=offline, console=TraceConsole(self._search), **kwargs)
        self.disco = disco

    def _homes(self) -> list[Path]:
        return self._search.subdirs(self.disco.cache)

    def find(self, version: int) -> Path | None:
        self._search.reset()
        for directory in self._homes():
            self._search.log(f'Disco Cache: "{directory}"')
            install = self._search.from_path(directory)
            if install is not None and self._search.matches(install, version):
                return install.home
        return None

    def find_all(self) -> list[JavaInstall]:
        self._search.reset()
        found: list[JavaInstall] = []
        for directory in self._homes():
            self._search.log(f'Disco Cache: "{directory}"')
            install = self._search.from_path(directory)
            if install is not None:
                found.append(install)
        return found

    def provision(self, version: int) -> JavaInstall | None:
        log = self._search.log
        log("Locators failed to find any suitable installs, attempting Disco download")

        platform = self.disco.platform
        candidates = self.disco.packages_for(version)
        if isinstance(candidates, Err) or not candidates.value:
            log(f"Failed to find any distros from Disco for {version} {platform.os.key} {platform.arch.key}")
            return None

        log(f"Found {len(candidates.value)} download candidates")
        pkg = candidates.value[0]
        log(f"Selected {pkg.distribution}: {pkg.filename}")

        home = self.disco.extract(pkg)
        if isinstance(home, Err):
            return None
        return self._search.from_path(home.value)

    def log_output(self) -> list[str]:
        return list(self._search.lines)
