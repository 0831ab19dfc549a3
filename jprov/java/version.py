"""Java version strings.

Both the JEP 223 scheme (``17.0.2+8``, ``21-ea+35``, ``11.0.20.1+1-LTS``) and the
legacy ``1.x`` scheme (``1.8.0_302``, ``1.8.0_302-b08``) parse into a
:class:`JavaVersion`. Versions order newest first, so ``sorted(versions)``
puts the one you most likely want at index 0.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["JavaVersion", "MalformedVersionError"]


_VERSION_RE = re.compile(
    r"""
    (?P<vnum>\d+(?:\.\d+)*)
    (?:-(?P<pre>[a-zA-Z0-9]+))?
    (?:(?P<sep>[+_])(?P<build>\d*))?
    (?:-(?P<opt>[-a-zA-Z0-9.]+))?
    """,
    re.VERBOSE,
)


class MalformedVersionError(ValueError):
    """Raised when a string is not a Java version."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid Java version: {text!r}")
        self.text = text


def _cmp(a: int, b: int) -> int:
    return (a > b) - (a < b)


def _cmp_present_first(a: int | None, b: int | None) -> int:
    """Descending, with None after any value."""
    if a is None:
        return 0 if b is None else 1
    if b is None:
        return -1
    return _cmp(b, a)


def _cmp_absent_first(a: str | None, b: str | None) -> int:
    """Ascending, with None before any value."""
    if a is None:
        return 0 if b is None else -1
    if b is None:
        return 1
    return (a > b) - (a < b)


@dataclass(frozen=True, slots=True)
class JavaVersion:
    """Parsed Java version.

    Attributes:
        text: The exact string that was parsed; ``str()`` returns it.
        vnum: Dotted numeric components, at least one.
        pre: Pre-release identifier (``ea``, ``beta``, ``2``) if any.
        build: Build number if any.
        opt: Trailing qualifier (``LTS``, ``b08``) if any.
    """

    text: str
    vnum: tuple[int, ...]
    pre: str | None = None
    build: int | None = None
    opt: str | None = None

    @classmethod
    def parse(cls, text: str) -> JavaVersion:
        """Parse a version string, raising MalformedVersionError."""
        m = _VERSION_RE.fullmatch(text)
        if m is None:
            raise MalformedVersionError(text)

        pre = m.group("pre")
        sep = m.group("sep")
        opt = m.group("opt")
        # "_" is only a build separator for pre-9 versions, which had no PRE
        if sep == "_" and pre is not None:
            raise MalformedVersionError(text)
        # an OPT needs either a PRE or a "+" in front of it
        if opt is not None and pre is None and sep is None:
            raise MalformedVersionError(text)

        build = m.group("build")
        return cls(
            text=text,
            vnum=tuple(int(n) for n in m.group("vnum").split(".")),
            pre=pre,
            build=int(build) if build else None,
            opt=opt,
        )

    @classmethod
    def parse_or_none(cls, text: str | None) -> JavaVersion | None:
        """Lenient :meth:`parse`: returns None instead of raising."""
        if not text:
            return None
        try:
            return cls.parse(text)
        except MalformedVersionError:
            return None

    @property
    def major(self) -> int:
        """Feature version: ``vnum[1]`` for ``1.x`` versions, else ``vnum[0]``."""
        if self.vnum[0] == 1 and len(self.vnum) > 1:
            return self.vnum[1]
        return self.vnum[0]

    @property
    def _pre_number(self) -> int | None:
        # a release counts as pre-release 0; a non-numeric tag has no number
        if self.pre is None:
            return 0
        return int(self.pre) if self.pre.isdigit() else None

    def compare_to(self, other: JavaVersion) -> int:
        """Negative if ``self`` is newer (sorts first), positive if older."""
        for a, b in zip(self.vnum, other.vnum):
            if a != b:
                return _cmp(b, a)
        if len(self.vnum) != len(other.vnum):
            return _cmp(len(other.vnum), len(self.vnum))

        ret = _cmp_present_first(self._pre_number, other._pre_number)
        if ret:
            return ret
        ret = _cmp_absent_first(self.pre, other.pre)
        if ret:
            return ret
        ret = _cmp_present_first(self.build, other.build)
        if ret:
            return ret
        return _cmp_absent_first(self.opt, other.opt)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, JavaVersion):
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, JavaVersion):
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, JavaVersion):
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, JavaVersion):
            return NotImplemented
        return self.compare_to(other) >= 0

    def __str__(self) -> str:
        return self.text
