"""A Java installation found on disk."""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from pathlib import Path

from jprov.platform.detection import detect_os

from .version import JavaVersion

__all__ = ["JavaInstall", "compare_installs", "sort_installs", "vendor_order"]


_PREFERRED_VENDORS = (
    re.compile(r"temurin|adoptium|eclipse foundation", re.IGNORECASE),
    re.compile(r"adoptopenjdk", re.IGNORECASE),
    re.compile(r"azul systems", re.IGNORECASE),
)


def vendor_order(vendor: str) -> int:
    """Preference rank of a vendor string, or -1 if it isn't a known one."""
    for index, pattern in enumerate(_PREFERRED_VENDORS):
        if pattern.search(vendor):
            return index
    return -1


@dataclass(frozen=True, slots=True)
class JavaInstall:
    """Identity of a JVM, as reported by the JVM itself.

    Attributes:
        home: Installation root (the directory holding ``bin/``).
        version: ``java.version`` as reported, if any.
        vendor: ``java.vendor`` as reported, if any.
        is_jdk: True if both ``bin/java`` and ``bin/javac`` exist.
    """

    home: Path
    version: str | None
    vendor: str | None
    is_jdk: bool

    @classmethod
    def from_home(cls, home: Path, version: str | None, vendor: str | None) -> JavaInstall:
        """Build an install, checking ``home/bin`` for the JDK tools."""
        os_ = detect_os()
        bin_dir = home / "bin"
        is_jdk = (bin_dir / os_.exe_name("java")).exists() and (
            bin_dir / os_.exe_name("javac")
        ).exists()
        return cls(home=home, version=version, vendor=vendor, is_jdk=is_jdk)

    @property
    def major_version(self) -> int:
        """Feature version, or -1 if the version is missing or unparseable."""
        parsed = JavaVersion.parse_or_none(self.version)
        return parsed.major if parsed is not None else -1

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, JavaInstall):
            return NotImplemented
        return compare_installs(self, other) < 0

    def __str__(self) -> str:
        kind = "JDK" if self.is_jdk else "JRE"
        return f"{self.vendor} {kind} v{self.version} @ {self.home.absolute()}"


def _cmp(a: int | str, b: int | str) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


def _compare_vendors(a: str, b: str) -> int:
    oa, ob = vendor_order(a), vendor_order(b)
    if oa == -1 and ob == -1:
        return _cmp(a, b)
    if oa == -1:
        return 1
    if ob == -1:
        return -1
    return _cmp(oa, ob)


def _compare_versions(a: str, b: str) -> int:
    va, vb = JavaVersion.parse_or_none(a), JavaVersion.parse_or_none(b)
    if va is None or vb is None:
        return _cmp(a, b)
    return va.compare_to(vb)


def compare_installs(a: JavaInstall, b: JavaInstall) -> int:
    """Preference order: negative when ``a`` should be picked over ``b``.

    JDKs beat JREs, then higher major versions, then known vendors
    (Temurin, AdoptOpenJDK, Azul, others alphabetically), then newer versions.
    A missing vendor or version loses to a present one.
    """
    if a.is_jdk != b.is_jdk:
        return -1 if a.is_jdk else 1

    ret = _cmp(b.major_version, a.major_version)
    if ret:
        return ret

    if a.vendor is None or b.vendor is None:
        if a.vendor is not b.vendor:
            return 1 if a.vendor is None else -1
    else:
        ret = _compare_vendors(a.vendor, b.vendor)
        if ret:
            return ret

    if a.version is None or b.version is None:
        if a.version is not b.version:
            return 1 if a.version is None else -1
        return 0
    return _compare_versions(a.version, b.version)


def sort_installs(installs: list[JavaInstall]) -> list[JavaInstall]:
    """Return installs sorted best first."""
    return sorted(installs, key=functools.cmp_to_key(compare_installs))
