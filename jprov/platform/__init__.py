"""Platform abstraction layer."""

from .detection import (
    OS,
    Arch,
    LibC,
    PlatformInfo,
    detect,
    detect_arch,
    detect_libc,
    detect_os,
    sniff_libc,
)
from .distro import Archive, Distro
from .paths import (
    home,
    user_cache_dir,
    user_config_dir,
)
from .process import (
    CommandResult,
    CommandRunner,
    DefaultCommandRunner,
    run_command,
)

__all__ = [
    # detection
    "OS",
    "Arch",
    "LibC",
    "PlatformInfo",
    "detect",
    "detect_arch",
    "detect_libc",
    "detect_os",
    "sniff_libc",
    # distro
    "Archive",
    "Distro",
    # paths
    "home",
    "user_cache_dir",
    "user_config_dir",
    # process
    "CommandResult",
    "CommandRunner",
    "DefaultCommandRunner",
    "run_command",
]
