"""Installs in the places operating systems and package managers put them."""

from __future__ import annotations

import os
import string
from collections.abc import Iterable
from pathlib import Path

from jprov.java.install import JavaInstall
from jprov.platform.detection import OS, detect_arch

from .base import Searcher

__all__ = ["JavaDirectoryLocator", "default_roots"]

_LINUX_ROOTS = (
    "/usr/java",
    "/usr/lib/jvm",
    "/usr/lib64/jvm",
    "/usr/local/",
    "/opt",
    "/app/jdk",
    "/opt/jdk",
    "/opt/jdks",
)

_MAC_HOME_FOLDER = Path("Contents", "Home")


def _windows_drives() -> list[Path]:
    return [Path(f"{letter}:\\") for letter in string.ascii_uppercase if os.path.exists(f"{letter}:\\")]


def default_roots(os_: OS) -> list[Path]:
    """Conventional install roots for ``os_`` that exist on this machine."""
    if os_ == OS.WINDOWS:
        roots: list[Path] = []
        for drive in _windows_drives():
            roots.append(drive / "Program Files" / "Java")
            if detect_arch().is_64bit:
                roots.append(drive / "Program Files (x86)" / "Java")
    elif os_ == OS.OSX:
        roots = [Path("/Library/Java/JavaVirtualMachines")]
    else:
        roots = [Path(p) for p in _LINUX_ROOTS]
    return [root for root in roots if os.path.isdir(root)]


class JavaDirectoryLocator:
    """Probes every home found directly in, or one level below, a set of roots.

    Roots are expanded into candidate homes once, when the locator is built;
    each ``find``/``find_all`` probes them again. Anything unreadable met
    while expanding is repeated at the top of every trace.
    """

    name = "JavaDirectoryLocator"

    def __init__(
        self,
        roots: Iterable[Path] | None = None,
        searcher: Searcher | None = None,
    ) -> None:
        self._search = searcher or Searcher()
        self._search.reset()
        self.candidates = self._expand(default_roots(self._search.os) if roots is None else roots)
        self._skipped = list(self._search.lines)

    def _home_in(self, path: Path) -> Path | None:
        if self._search.exists(path / self._search.exe_name):
            return path
        # macOS bundles: Foo.jdk/Contents/Home
        if self._search.os == OS.OSX and self._search.exists(path / _MAC_HOME_FOLDER / self._search.exe_name):
            return path / _MAC_HOME_FOLDER
        return None

    def _expand(self, roots: Iterable[Path]) -> list[Path]:
        candidates: list[Path] = []
        for root in roots:
            direct = self._home_in(root)
            if direct is not None:
                candidates.append(direct)
                continue
            for child in self._search.subdirs(root):
                if (found := self._home_in(child)) is not None:
                    candidates.append(found)
        return candidates

    def _start(self) -> None:
        self._search.reset()
        self._search.lines.extend(self._skipped)

    def _probe(self, path: Path) -> JavaInstall | None:
        self._search.log(f'Directory: "{path}"')
        return self._search.from_path(path)

    def find(self, version: int) -> Path | None:
        self._start()
        for path in self.candidates:
            install = self._probe(path)
            if install is not None and self._search.matches(install, version):
                return install.home
        return None

    def find_all(self) -> list[JavaInstall]:
        self._start()
        return [install for path in self.candidates if (install := self._probe(path))]

    def log_output(self) -> list[str]:
        return list(self._search.lines)

    def provision(self, version: int) -> JavaInstall | None:
        return None
