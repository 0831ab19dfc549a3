"""Operating system, CPU architecture and C library identification.

Each enum variant carries the key the foojay catalog uses for it plus the
alias strings a live system reports (``sys.platform``, ``platform.machine()``
or a JVM's ``os.arch``). Detection of the running platform is done lazily and
cached for the lifetime of the process.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from .process import CommandRunner, DefaultCommandRunner

if TYPE_CHECKING:
    from jprov.output.console import ConsoleProtocol

__all__ = [
    "OS",
    "Arch",
    "LibC",
    "PlatformInfo",
    "detect",
    "detect_arch",
    "detect_libc",
    "detect_os",
    "sniff_libc",
]


class OS(Enum):
    """Operating system, keyed by catalog vocabulary."""

    AIX = ("aix", ("aix",))
    ALPINE = ("alpine_linux", ("alpine",))
    LINUX = ("linux", ("linux", "unix"))
    MUSL = ("linux_musl", ("musl",))
    OSX = ("macos", ("mac", "osx", "darwin"))
    QNX = ("qnx", ("qnx",))
    SOLARIS = ("solaris", ("sunos",))
    WINDOWS = ("windows", ("win",))
    UNKNOWN = ("unknown", ())

    def __init__(self, key: str, aliases: tuple[str, ...]) -> None:
        self.key = key
        self.aliases = aliases

    def __str__(self) -> str:
        return self.key

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self == OS.WINDOWS else ""

    def exe_name(self, name: str) -> str:
        """Executable name with the platform suffix, e.g. ``java.exe`` on Windows."""
        return f"{name}{self.exe_suffix}"

    @classmethod
    def by_key(cls, key: str | None) -> OS | None:
        for value in cls:
            if value.key == key:
                return value
        return None

    @classmethod
    def from_name(cls, name: str) -> OS:
        """Match a live OS name by substring against each variant's aliases."""
        lowered = name.lower()
        for value in cls:
            if any(alias in lowered for alias in value.aliases):
                return value
        return OS.UNKNOWN


class Arch(Enum):
    """CPU architecture.

    A variant may name a parent family: AMD64 and X86_64 are both X64. A
    request for X86_64 is satisfied by packages tagged X64.
    """

    X86 = ("x86", ("x86", "x32", "286"), None)
    X64 = ("x64", ("x64",), None)
    AARCH32 = ("aarch32", ("aarch32",), None)
    AARCH64 = ("aarch64", ("aarch64",), None)
    PPC = ("ppc", ("ppc",), None)
    PPC64 = ("ppc64", ("ppc64",), None)
    AMD64 = ("amd64", ("amd64", "_amd64"), "x64")
    ARM = ("arm", ("arm",), None)
    ARM32 = ("arm32", ("arm32", "aarch32", "armv6", "armv7l", "armv7"), None)
    ARM64 = ("arm64", ("arm64", "armv8"), "aarch64")
    MIPS = ("mips", ("mips",), None)
    PPC64EL = ("ppc64el", ("ppc64el",), "ppc64")
    PPC64LE = ("ppc64le", ("ppc64le",), "ppc64")
    RISCV64 = ("riscv64", ("riscv64", "risc-v", "riscv"), None)
    S390 = ("s390", ("s390",), None)
    S390X = ("s390x", ("s390x",), None)
    SPARC = ("sparc", ("sparc",), None)
    SPARC_V9 = ("sparcv9", ("sparcv9",), None)
    X86_64 = ("x86-64", ("x86-64", "x86_64", "x86lx64"), "x64")
    X86_32 = ("x86-32", ("x86-32", "x86_32", "x86lx32"), "x86")
    I386 = ("i386", ("i386", "386"), "x86")
    I486 = ("i486", ("i486", "486"), "x86")
    I586 = ("i586", ("i586", "586"), "x86")
    I686 = ("i686", ("i686", "686"), "x86")
    UNKNOWN = ("unknown", (), None)

    def __init__(self, key: str, aliases: tuple[str, ...], parent_key: str | None) -> None:
        self.key = key
        self.aliases = aliases
        self._parent_key = parent_key

    def __str__(self) -> str:
        return self.key

    @property
    def parent(self) -> Arch | None:
        return Arch.by_key(self._parent_key) if self._parent_key else None

    @property
    def is_64bit(self) -> bool:
        return self in _64BIT

    def accepts(self, candidate: Arch | None) -> bool:
        """True if a package built for ``candidate`` runs on this architecture."""
        if candidate is None:
            return False
        return candidate == self or (self.parent is not None and self.parent == candidate)

    @classmethod
    def by_key(cls, key: str | None) -> Arch | None:
        for value in cls:
            if value.key == key:
                return value
        return None

    @classmethod
    def from_name(cls, name: str) -> Arch:
        """Exact alias match of a live architecture string."""
        lowered = name.lower()
        for value in cls:
            if lowered in value.aliases:
                return value
        return Arch.UNKNOWN


_64BIT = frozenset(
    {
        Arch.X64,
        Arch.AMD64,
        Arch.ARM64,
        Arch.X86_64,
        Arch.AARCH64,
        Arch.PPC64,
        Arch.PPC64EL,
        Arch.PPC64LE,
        Arch.RISCV64,
    }
)


class LibC(Enum):
    """C library flavour of a package or of the running system."""

    GLIBC = "glibc"
    LIBC = "libc"
    MUSL = "musl"
    C_STD_LIB = "c_std_lib"

    @property
    def key(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value

    @classmethod
    def by_key(cls, key: str | None) -> LibC | None:
        for value in cls:
            if value.key == key:
                return value
        return None


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    """Detected platform. Use :func:`detect` to get the running one."""

    os: OS
    arch: Arch
    libc: LibC

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}-{self.libc}"


def _read_os_release() -> list[str] | None:
    """Read /etc/os-release lines, or None if it can't be read."""
    try:
        return Path("/etc/os-release").read_text(encoding="utf-8").splitlines()
    except (FileNotFoundError, PermissionError, UnicodeDecodeError, OSError):
        return None


def _is_alpine(lines: list[str] | None) -> bool:
    if not lines:
        return False
    for line in lines:
        lowered = line.lower()
        if lowered.startswith("name=") and "alpine" in lowered:
            return True
    return False


@lru_cache(maxsize=1)
def detect_os() -> OS:
    """Detect the current operating system (cached).

    Linux systems naming Alpine in /etc/os-release are reported as ALPINE.
    """
    current = OS.from_name(_sys.platform)
    if current == OS.LINUX and _is_alpine(_read_os_release()):
        return OS.ALPINE
    return current


def _machine() -> str:
    # platform.machine() may query WMI on Windows, which is slow or hangs.
    if _sys.platform.startswith(("win32", "cygwin", "msys")):
        return (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        )
    return _platform.machine()


@lru_cache(maxsize=1)
def detect_arch() -> Arch:
    """Detect the current CPU architecture (cached). Never fails."""
    return Arch.from_name(_machine())


def _mentions_musl(lines: tuple[str, ...]) -> bool:
    return any("musl" in line.lower() for line in lines)


def sniff_libc(
    current: OS,
    runner: CommandRunner,
    console: ConsoleProtocol | None = None,
) -> LibC:
    """Work out which C library a Linux system uses.

    Asks ``getconf GNU_LIBC_VERSION`` and then ``ldd --version``; either
    mentioning musl wins. Commands that fail are reported, not fatal.
    """
    if current in (OS.MUSL, OS.ALPINE):
        return LibC.MUSL
    if current != OS.LINUX:
        return LibC.GLIBC

    for cmd in (["getconf", "GNU_LIBC_VERSION"], ["ldd", "--version"]):
        result = runner.run(cmd)
        # musl's ldd prints its banner and exits non-zero
        if _mentions_musl(result.lines):
            return LibC.MUSL
        if not result.ok and console is not None:
            console.debug(f"Failed to run `{' '.join(cmd)}`: {result.first_line()}")

    return LibC.GLIBC


@lru_cache(maxsize=1)
def detect_libc() -> LibC:
    """Detect the running C library (cached)."""
    from jprov.output.console import RichConsole

    return sniff_libc(detect_os(), DefaultCommandRunner(timeout=10.0), RichConsole(stderr=True))


@lru_cache(maxsize=1)
def detect() -> PlatformInfo:
    """Detect complete platform information (cached)."""
    return PlatformInfo(os=detect_os(), arch=detect_arch(), libc=detect_libc())
