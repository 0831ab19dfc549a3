"""Installs named by ``JAVA_HOME``-style environment variables.

CI images commonly export one variable per installed JDK, e.g. GitHub's
runners set ``JAVA_HOME_17_X64`` and ``JAVA_HOME_21_arm64``.
"""

from __future__ import annotations

from pathlib import Path

from jprov.java.install import JavaInstall

from .base import Searcher

__all__ = ["JavaHomeLocator"]


class JavaHomeLocator:
    """Checks ``JAVA_HOME_<v>_X64``, ``JAVA_HOME_<v>_ARM64``, ``JAVA_HOME_<v>`` then ``JAVA_HOME``."""

    name = "JavaHomeLocator"

    def __init__(self, searcher: Searcher | None = None) -> None:
        self._search = searcher or Searcher()

    def find(self, version: int) -> Path | None:
        self._search.reset()
        for name in (
            f"JAVA_HOME_{version}_X64",
            f"JAVA_HOME_{version}_ARM64",
            f"JAVA_HOME_{version}_arm64",
            f"JAVA_HOME_{version}",
        ):
            result = self._search.from_env(name)
            if result is not None:
                return result.home

        # plain JAVA_HOME says nothing about its version, so check it
        result = self._search.from_env("JAVA_HOME")
        if result is not None and self._search.matches(result, version):
            return result.home
        return None

    def find_all(self) -> list[JavaInstall]:
        self._search.reset()
        found: list[JavaInstall] = []
        for key in sorted(self._search.environ):
            if key.startswith("JAVA_HOME"):
                install = self._search.from_env(key)
                if install is not None:
                    found.append(install)
        return found

    def log_output(self) -> list[str]:
        return list(self._search.lines)

    def provision(self, version: int) -> JavaInstall | None:
        return None
