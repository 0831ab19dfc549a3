"""Run locators in order until one produces an install."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from jprov.core.result import Err, Ok, Result
from jprov.java.install import JavaInstall, sort_installs

from .base import JavaLocator

__all__ = ["LocatorTrace", "ResolveFailure", "JavaResolver"]


@dataclass(frozen=True, slots=True)
class LocatorTrace:
    """What one locator looked at during a failed resolution."""

    name: str
    lines: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ResolveFailure:
    """No locator found or provisioned the requested version."""

    version: int
    traces: tuple[LocatorTrace, ...]

    def __str__(self) -> str:
        return f"Failed to find java version {self.version}"

    def report(self) -> list[str]:
        """Human readable trace, one block per locator."""
        out = [f"{self}, locators searched:"]
        for trace in self.traces:
            out.append(f"Locator {trace.name}:")
            out.extend(f"  {line}" for line in trace.lines)
        return out


class JavaResolver:
    """Ordered locator chain.

    Usage:
        resolver = JavaResolver([JavaHomeLocator(), DiscoLocator(cache)])
        match resolver.find(17):
            case Ok(home):
                print(home)
            case Err(failure):
                print("\\n".join(failure.report()))
    """

    def __init__(self, locators: Sequence[JavaLocator]) -> None:
        self.locators = list(locators)

    def find(self, version: int) -> Result[Path, ResolveFailure]:
        """First locator hit; failing that, the first successful provision."""
        for locator in self.locators:
            home = locator.find(version)
            if home is not None:
                return Ok(home)

        for locator in self.locators:
            install = locator.provision(version)
            if install is not None:
                return Ok(install.home)

        traces = tuple(LocatorTrace(locator.name, tuple(locator.log_output())) for locator in self.locators)
        return Err(ResolveFailure(version=version, traces=traces))

    def find_all(self) -> list[JavaInstall]:
        """Every install any locator sees; the first sighting of a home wins."""
        seen: dict[Path, JavaInstall] = {}
        for locator in self.locators:
            for install in locator.find_all():
                seen.setdefault(install.home, install)
        return sort_installs(list(seen.values()))
