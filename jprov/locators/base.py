"""What every locator can do, and the probing helper they share.

A locator never raises because a candidate is unusable. It writes a line to
its trace (``log_output()``) saying what it looked at and why it was
rejected, then moves on. The trace is reset at the start of each ``find`` or
``find_all`` call.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from jprov.java.install import JavaInstall
from jprov.java.probe import Prober, test_jdk
from jprov.output.console import Style
from jprov.platform.detection import OS, detect_os

__all__ = [
    "JavaLocator",
    "Searcher",
    "TraceConsole",
]


@runtime_checkable
class JavaLocator(Protocol):
    """A source of Java installs."""

    name: str

    def find(self, version: int) -> Path | None:
        """Home of the first install with major ``version``, or None."""
        ...

    def find_all(self) -> list[JavaInstall]:
        """Every install this locator can see, in discovery order."""
        ...

    def log_output(self) -> list[str]:
        """Trace of the most recent ``find``/``find_all``/``provision`` call."""
        ...

    def provision(self, version: int) -> JavaInstall | None:
        """Acquire an install that doesn't exist yet. Most locators can't."""
        ...


class Searcher:
    """Probes candidate homes and records why each was accepted or not."""

    def __init__(
        self,
        *,
        prober: Prober | None = None,
        environ: Mapping[str, str] | None = None,
        os_: OS | None = None,
    ) -> None:
        self._prober = prober or test_jdk
        self._environ = environ
        self._os = os_
        self.lines: list[str] = []

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    @property
    def os(self) -> OS:
        return self._os or detect_os()

    @property
    def exe_name(self) -> str:
        return "bin/" + self.os.exe_name("java")

    def reset(self) -> None:
        self.lines = []

    def log(self, line: str) -> None:
        self.lines.append(line)

    def exists(self, path: Path) -> bool:
        """``path.exists()``; a path that can't be checked is logged and treated as missing."""
        try:
            return path.exists()
        except OSError:
            self.log(f'  Unreadable: "{path}"')
            return False

    def is_dir(self, path: Path) -> bool:
        try:
            return path.is_dir()
        except OSError:
            self.log(f'  Unreadable: "{path}"')
            return False

    def subdirs(self, path: Path) -> list[Path]:
        """Sorted child directories of ``path``. Empty if it can't be listed."""
        try:
            children = sorted(path.iterdir())
        except (FileNotFoundError, NotADirectoryError):
            return []
        except OSError:
            self.log(f'  Unreadable: "{path}"')
            return []
        return [child for child in children if self.is_dir(child)]

    def from_env(self, name: str) -> JavaInstall | None:
        value = self.environ.get(name)
        if value is None:
            self.log(f'Environment: "{name}" Empty')
            return None

        self.log(f'Environment: "{name}"')
        self.log(f'  Value: "{value}"')
        return self.from_path(Path(value))

    def from_path(self, path: Path) -> JavaInstall | None:
        if not self.exists(path / self.exe_name):
            self.log("  Missing Executable")
            return None

        result = self._prober(path)
        if result.exit_code != 0:
            self.log(f"  Exit code: {result.exit_code}")
            self.lines.extend(f"  {line}" for line in result.lines)
        return result.install

    def matches(self, install: JavaInstall, version: int) -> bool:
        """True if ``install`` has major ``version``; logs the mismatch otherwise."""
        if install.major_version != version:
            self.log(f"  Wrong version: Was {install.major_version} wanted {version}")
            return False
        return True


class TraceConsole:
    """Console that appends everything to a searcher's trace."""

    def __init__(self, searcher: Searcher) -> None:
        self._searcher = searcher

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._searcher.log(message)

    def success(self, message: str) -> None:
        self._searcher.log(message)

    def error(self, message: str) -> None:
        self._searcher.log(message)

    def warning(self, message: str) -> None:
        self._searcher.log(message)

    def info(self, message: str) -> None:
        self._searcher.log(message)

    def debug(self, message: str) -> None:
        self._searcher.log(message)

    def header(self, message: str) -> None:
        self._searcher.log(message)

    def newline(self) -> None:
        pass
