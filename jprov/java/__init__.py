"""Java identity: version strings, installs and the JVM probe."""

from .install import JavaInstall, compare_installs, sort_installs, vendor_order
from .probe import ProbeResult, Prober, parse_probe_lines, test_jdk
from .version import JavaVersion, MalformedVersionError

__all__ = [
    "JavaInstall",
    "JavaVersion",
    "MalformedVersionError",
    "ProbeResult",
    "Prober",
    "compare_installs",
    "parse_probe_lines",
    "sort_installs",
    "test_jdk",
    "vendor_order",
]
