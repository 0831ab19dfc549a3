"""Installs Gradle knows about.

Gradle finds toolchains through (https://docs.gradle.org/current/userguide/toolchains.html):

- ``org.gradle.java.installations.fromEnv=ENV1,ENV2``: env vars holding homes
- ``org.gradle.java.installations.paths=PATH1,PATH2``: homes directly
- ``JDK<digits>`` env vars (Gradle test distribution agents)
- JDKs it provisioned itself under ``<gradle user home>/jdks``

Provisioned JDKs count only once Gradle has marked them ready. Before Gradle
8.8 the archive root was not trimmed, so the marker may sit one level down.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path

from jprov.java.install import JavaInstall
from jprov.platform.detection import OS
from jprov.platform.paths import home

from .base import Searcher

__all__ = [
    "FROM_ENV_PROPERTY",
    "GradleLocator",
    "PATHS_PROPERTY",
    "gradle_user_home",
    "load_gradle_properties",
]

FROM_ENV_PROPERTY = "org.gradle.java.installations.fromEnv"
PATHS_PROPERTY = "org.gradle.java.installations.paths"
USER_HOME_PROPERTY = "gradle.user.home"

MARKER_FILES = (".ready", "provisioned.ok")
MAC_HOME_FOLDER = Path("Contents", "Home")

_GRADLE_ENV = re.compile(r"JDK\d+")


def gradle_user_home(properties: Mapping[str, str], environ: Mapping[str, str]) -> Path:
    """``gradle.user.home`` property, then ``GRADLE_USER_HOME``, then ``~/.gradle``."""
    value = properties.get(USER_HOME_PROPERTY) or environ.get("GRADLE_USER_HOME")
    path = Path(value).expanduser() if value else home() / ".gradle"
    try:
        return path.resolve()
    except OSError:
        return path


def load_gradle_properties(path: Path) -> dict[str, str]:
    """Read a ``gradle.properties`` file. Missing or unreadable files are empty."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return {}

    props: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith(("#", "!")):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            key, sep, value = line.partition(":")
        if sep:
            props[key.strip()] = value.strip()
    return props


def _split(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class GradleLocator:
    """Looks where Gradle's own toolchain resolution looks."""

    name = "GradleLocator"

    def __init__(
        self,
        properties: Mapping[str, str] | None = None,
        searcher: Searcher | None = None,
    ) -> None:
        self._search = searcher or Searcher()
        self._properties = dict(properties or {})

    def _accept(self, found: list[JavaInstall], install: JavaInstall | None, version: int) -> bool:
        """Add ``install`` to ``found``; True when the search can stop."""
        if install is None:
            return False
        if version == -1:
            found.append(install)
            return False
        if self._search.matches(install, version):
            found.append(install)
            return True
        return False

    def _from_property_envs(self, found: list[JavaInstall], version: int) -> None:
        prop = self._properties.get(FROM_ENV_PROPERTY)
        self._search.log(f"Property: {FROM_ENV_PROPERTY} = {prop}")
        for name in _split(prop or ""):
            if self._accept(found, self._search.from_env(name), version):
                return

    def _from_property_paths(self, found: list[JavaInstall], version: int) -> None:
        prop = self._properties.get(PATHS_PROPERTY)
        self._search.log(f"Property: {PATHS_PROPERTY} = {prop}")
        for path in _split(prop or ""):
            if self._accept(found, self._search.from_path(Path(path).expanduser()), version):
                return

    def _has_marker(self, path: Path) -> bool:
        return any(self._search.exists(path / marker) for marker in MARKER_FILES)

    def _markers(self, root: Path) -> list[Path]:
        marked = [root] if self._has_marker(root) else []
        marked.extend(child for child in self._search.subdirs(root) if self._has_marker(child))
        return marked

    def _mac_home(self, root: Path) -> Path:
        if self._search.exists(root / MAC_HOME_FOLDER):
            return root / MAC_HOME_FOLDER
        for child in self._search.subdirs(root):
            if self._search.exists(child / MAC_HOME_FOLDER):
                return child / MAC_HOME_FOLDER
        return root

    def _from_gradle_home(self, found: list[JavaInstall], version: int) -> None:
        gradle_home = gradle_user_home(self._properties, self._search.environ)
        if not self._search.is_dir(gradle_home):
            self._search.log(f'Gradle home: "{gradle_home}" Does not exist')
            return
        jdks = gradle_home / "jdks"
        if not self._search.is_dir(jdks):
            self._search.log(f'Gradle Home JDKs: "{jdks}" Does not exist')
            return

        for directory in self._search.subdirs(jdks):
            for marked in self._markers(directory):
                candidate = self._mac_home(marked) if self._search.os == OS.OSX else marked
                self._search.log(f'Gradle Home JDK: "{candidate}"')
                if self._accept(found, self._search.from_path(candidate), version):
                    return

    def find(self, version: int) -> Path | None:
        self._search.reset()
        found: list[JavaInstall] = []

        self._from_property_envs(found, version)
        if found:
            return found[0].home

        self._from_property_paths(found, version)
        if found:
            return found[0].home

        install = self._search.from_env(f"JDK{version}")
        if install is not None and self._search.matches(install, version):
            return install.home

        self._from_gradle_home(found, version)
        return found[0].home if found else None

    def find_all(self) -> list[JavaInstall]:
        self._search.reset()
        found: list[JavaInstall] = []
        self._from_property_envs(found, -1)
        self._from_property_paths(found, -1)
        for key in sorted(self._search.environ):
            if _GRADLE_ENV.fullmatch(key):
                self._accept(found, self._search.from_env(key), -1)
        self._from_gradle_home(found, -1)
        return found

    def log_output(self) -> list[str]:
        return list(self._search.lines)

    def provision(self, version: int) -> JavaInstall | None:
        return None
