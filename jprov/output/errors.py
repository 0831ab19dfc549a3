"""Error presentation utilities.

Catalog failures carry their own exit codes so scripts can tell a network
outage from a tampered archive.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from jprov.core.errors import ErrorCode
from jprov.disco.errors import (
    ChecksumMismatch,
    DiscoError,
    ExtractionFailed,
    NetworkFailure,
    NotFound,
    Offline,
    UnsafeArchive,
    UnsupportedArchive,
)
from jprov.output.console import Style

if TYPE_CHECKING:
    from jprov.output.console import ConsoleProtocol

__all__ = ["disco_error_exit_code", "print_disco_error"]


def print_disco_error(error: DiscoError, console: ConsoleProtocol) -> None:
    """Print catalog error to console with appropriate formatting."""
    console.error(str(error))
    match error:
        case Offline():
            console.print("hint: run without --offline to fetch it", Style.DIM)
        case ChecksumMismatch(path=path):
            console.print(f"hint: {path.name} was deleted, the next run downloads it again", Style.DIM)
        case NetworkFailure(status=0):
            console.print("hint: check the network connection or the catalog url in config.toml", Style.DIM)
        case _:
            pass


def disco_error_exit_code(error: DiscoError) -> int:
    """Get exit code for a catalog error."""
    match error:
        case NotFound():
            return int(ErrorCode.NOT_FOUND)
        case Offline() | NetworkFailure():
            return int(ErrorCode.NETWORK_ERROR)
        case ChecksumMismatch():
            return int(ErrorCode.INTEGRITY_ERROR)
        case UnsafeArchive():
            return int(ErrorCode.SECURITY_ERROR)
        case UnsupportedArchive() | ExtractionFailed():
            return int(ErrorCode.IO_ERROR)
