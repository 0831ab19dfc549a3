"""Exit codes for the command line.

Values are process exit codes and must stay stable, build scripts branch on
them:
- 0: Success
- 1: User error (bad arguments, malformed version)
- 2: No matching Java install could be found or provisioned
- 4: Network error (catalog unreachable, download failed)
- 5: I/O error (cache not writable, archive unreadable)
- 6: Integrity error (checksum mismatch)
- 7: Security error (archive would extract outside its target)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    NOT_FOUND = 2
    NETWORK_ERROR = 4
    IO_ERROR = 5
    INTEGRITY_ERROR = 6
    SECURITY_ERROR = 7

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
