"""Subprocess execution for probing external binaries.

Both the JVM probe and the libc sniff run a command, merge stderr into
stdout and treat the output as untrusted lines of text. Nothing here raises
for a failing command: a spawn failure or timeout is reported as a negative
exit code with the error text as the only output line.

Usage:
    result = run_command(["getconf", "GNU_LIBC_VERSION"])
    if result.ok:
        print(result.lines[0])
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

__all__ = [
    "CommandResult",
    "CommandRunner",
    "DefaultCommandRunner",
    "EXIT_SPAWN_FAILED",
    "EXIT_TIMED_OUT",
    "run_command",
]

EXIT_SPAWN_FAILED = -1
EXIT_TIMED_OUT = -2


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Output of a finished command.

    Attributes:
        command: The command that was executed.
        exit_code: Process exit code, or a negative value if it never ran to
            completion.
        lines: Combined stdout/stderr, one entry per line, in order.
    """

    command: tuple[str, ...]
    exit_code: int
    lines: tuple[str, ...]

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def first_line(self) -> str:
        return self.lines[0] if self.lines else ""

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} (exit {self.exit_code})"


def run_command(
    cmd: Sequence[str],
    *,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run a command to completion and collect every output line.

    ``communicate`` reads until EOF and then reaps the process, so output
    written just before exit is never lost.

    Args:
        cmd: Command and arguments.
        cwd: Working directory (inherits ours if None).
        timeout: Maximum seconds to wait (None for no limit).
    """
    command = tuple(str(c) for c in cmd)
    try:
        proc = subprocess.Popen(
            command,
            cwd=str(cwd) if cwd is not None else None,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
    except OSError as e:
        return CommandResult(command=command, exit_code=EXIT_SPAWN_FAILED, lines=(str(e),))

    try:
        output, _ = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        proc.kill()
        output, _ = proc.communicate()
        lines = (*output.splitlines(), f"Command timed out after {timeout}s")
        return CommandResult(command=command, exit_code=EXIT_TIMED_OUT, lines=lines)

    return CommandResult(
        command=command,
        exit_code=proc.returncode,
        lines=tuple(output.splitlines()),
    )


class CommandRunner(Protocol):
    """Protocol for running commands, so probes can be faked in tests."""

    def run(self, cmd: Sequence[str]) -> CommandResult: ...


class DefaultCommandRunner:
    """Runs commands for real via :func:`run_command`."""

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    def run(self, cmd: Sequence[str]) -> CommandResult:
        return run_command(cmd, timeout=self._timeout)
