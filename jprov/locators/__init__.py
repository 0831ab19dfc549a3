"""Finding Java installs already on this machine, or provisioning new ones."""

from .base import JavaLocator, Searcher, TraceConsole
from .directory import JavaDirectoryLocator, default_roots
from .disco import DiscoLocator
from .env import JavaHomeLocator
from .gradle import GradleLocator, gradle_user_home, load_gradle_properties
from .resolver import JavaResolver, LocatorTrace, ResolveFailure

__all__ = [
    # base
    "JavaLocator",
    "Searcher",
    "TraceConsole",
    # locators
    "DiscoLocator",
    "GradleLocator",
    "JavaDirectoryLocator",
    "JavaHomeLocator",
    "default_roots",
    "gradle_user_home",
    "load_gradle_properties",
    # resolver
    "JavaResolver",
    "LocatorTrace",
    "ResolveFailure",
]
