"""Ask a JVM who it is.

``test_jdk`` runs ``<home>/bin/java -classpath <probe dir> JavaProbe`` and
turns the ``JAVA_PROBE: <key> <value>`` lines it prints into a
:class:`JavaInstall`. The JVM's output is untrusted text: anything that
doesn't look like a probe line is kept for diagnostics and otherwise ignored.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from jprov.platform.detection import detect_os
from jprov.platform.paths import user_cache_dir
from jprov.platform.process import EXIT_SPAWN_FAILED, CommandRunner, DefaultCommandRunner

from .install import JavaInstall
from .probe_class import PROBE_CLASS_NAME, PROBE_PREFIX, UNSET, ensure_probe_classpath

__all__ = [
    "ProbeResult",
    "Prober",
    "parse_probe_lines",
    "test_jdk",
]

MISSING_EXECUTABLE = "missing java executable"

_VERSION_KEYS = ("java.version", "java.runtime.version", "java.vm.version")
_VENDOR_KEYS = ("java.vendor", "java.vm.vendor")


@dataclass(frozen=True, slots=True)
class ProbeResult:
    """Outcome of probing one home directory.

    ``install`` is None unless the JVM ran and exited 0; ``lines`` always
    holds the raw output for diagnostics.
    """

    exit_code: int
    lines: tuple[str, ...]
    install: JavaInstall | None = None

    @property
    def ok(self) -> bool:
        return self.install is not None


type Prober = Callable[[Path], ProbeResult]


def parse_probe_lines(lines: Iterable[str]) -> dict[str, str]:
    """Collect ``JAVA_PROBE: key value`` lines into a dict."""
    props: dict[str, str] = {}
    start = len(PROBE_PREFIX)
    for line in lines:
        if not line.startswith(PROBE_PREFIX):
            continue
        idx = line.find(" ", start)
        if idx == -1:
            continue
        props[line[start:idx]] = line[idx + 1 :]
    return props


def _first(props: dict[str, str], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = props.get(key)
        if value is not None and value != UNSET:
            return value
    return None


def test_jdk(
    home: Path,
    *,
    runner: CommandRunner | None = None,
    probe_dir: Path | None = None,
) -> ProbeResult:
    """Probe the JVM under ``home``.

    Args:
        home: Candidate installation root.
        runner: Command runner (defaults to running for real).
        probe_dir: Directory to hold ``JavaProbe.class`` (defaults to
            ``<user cache>/probe``).
    """
    java = home / "bin" / detect_os().exe_name("java")
    if not java.exists():
        return ProbeResult(exit_code=EXIT_SPAWN_FAILED, lines=(MISSING_EXECUTABLE,))

    classpath = str(ensure_probe_classpath(probe_dir or user_cache_dir() / "probe").absolute())
    # some very old JVMs need their classes.zip on the classpath explicitly
    classes = home / "libs" / "classes.zip"
    if classes.exists():
        classpath += os.pathsep + str(classes.absolute())

    result = (runner or DefaultCommandRunner()).run(
        [str(java.absolute()), "-classpath", classpath, PROBE_CLASS_NAME]
    )
    if not result.ok:
        return ProbeResult(exit_code=result.exit_code, lines=result.lines)

    props = parse_probe_lines(result.lines)
    install = JavaInstall.from_home(
        home,
        version=_first(props, _VERSION_KEYS),
        vendor=_first(props, _VENDOR_KEYS),
    )
    return ProbeResult(exit_code=result.exit_code, lines=result.lines, install=install)
