"""Errors returned by the catalog client.

Absence and network trouble are ordinary outcomes; ``ChecksumMismatch`` and
``UnsafeArchive`` mean the data on disk must not be used.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class NotFound:
    what: str

    def __str__(self) -> str:
        return f"Not found: {self.what}"


@dataclass(frozen=True, slots=True)
class Offline:
    what: str

    def __str__(self) -> str:
        return f"Offline mode, can't fetch {self.what}"


@dataclass(frozen=True, slots=True)
class NetworkFailure:
    url: str
    message: str
    status: int = 0

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@dataclass(frozen=True, slots=True)
class ChecksumMismatch:
    path: Path
    algorithm: str
    expected: str
    actual: str

    def __str__(self) -> str:
        return (
            f"{self.algorithm} mismatch for {self.path.name}: "
            f"expected {self.expected}, got {self.actual}"
        )


@dataclass(frozen=True, slots=True)
class UnsafeArchive:
    archive: Path
    entry: str

    def __str__(self) -> str:
        return f"Refusing to extract {self.archive.name}: entry {self.entry!r} escapes the target directory"


@dataclass(frozen=True, slots=True)
class UnsupportedArchive:
    archive: Path
    format: str | None

    def __str__(self) -> str:
        return f"Unsupported archive format {self.format or 'unknown'}: {self.archive.name}"


@dataclass(frozen=True, slots=True)
class ExtractionFailed:
    archive: Path
    message: str

    def __str__(self) -> str:
        return f"Extracting {self.archive.name} failed: {self.message}"


DiscoError = (
    NotFound
    | Offline
    | NetworkFailure
    | ChecksumMismatch
    | UnsafeArchive
    | UnsupportedArchive
    | ExtractionFailed
)
