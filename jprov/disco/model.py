"""Catalog records and their JSON form.

The catalog sends snake_case JSON and uses ``""`` for "no value". Records read
``""`` as None and write None as ``null``, so the cache files never mix the
two. Enum views (``os``, ``arch`` and friends) are computed from the raw
strings on access; unknown catalog values map to None.

Example package entry::

    {
      "id": "b59bd89cc54927a1609bb71af0d8921a",
      "archive_type": "zip",
      "distribution": "zulu",
      "major_version": 22,
      "java_version": "22.0.2+9",
      "jdk_version": 22,
      "operating_system": "linux",
      "lib_c_type": "glibc",
      "architecture": "x64",
      "javafx_bundled": false,
      "filename": "zulu22.32.15-ca-jdk22.0.2-linux_x64.zip",
      "links": {
        "pkg_info_uri": "https://api.foojay.io/disco/v3.0/ids/b59bd8...",
        "pkg_download_redirect": "https://api.foojay.io/disco/v3.0/ids/b59bd8.../redirect"
      },
      "size": 215197508
    }
"""

from __future__ import annotations

import functools
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from jprov.core.structured import (
    StrDict,
    as_str_dict,
    blank_to_none,
    get_bool,
    get_int,
    get_list,
    get_str,
    get_table,
)
from jprov.java.version import JavaVersion
from jprov.platform.detection import OS, Arch, LibC
from jprov.platform.distro import Archive, Distro

__all__ = [
    "DownloadInfo",
    "Links",
    "Package",
    "PackageInfo",
    "compare_packages",
    "dump_json",
    "load_json",
    "parse_envelope",
    "sort_packages",
]


def _plain_name(value: str) -> bool:
    """True if ``value`` names one entry directly inside a directory."""
    return value not in {"", ".", ".."} and "\\" not in value and Path(value).name == value


@dataclass(frozen=True, slots=True)
class Links:
    pkg_info_uri: str | None = None
    pkg_download_redirect: str | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, object]) -> Links:
        return cls(
            pkg_info_uri=get_str(data, "pkg_info_uri"),
            pkg_download_redirect=get_str(data, "pkg_download_redirect"),
        )

    def to_json(self) -> StrDict:
        return {
            "pkg_info_uri": self.pkg_info_uri,
            "pkg_download_redirect": self.pkg_download_redirect,
        }


@dataclass(frozen=True, slots=True)
class Package:
    """One downloadable package from the catalog."""

    id: str
    filename: str
    major_version: int = 0
    jdk_version: int = 0
    java_version: str | None = None
    archive_type: str | None = None
    distribution: str | None = None
    operating_system: str | None = None
    lib_c_type: str | None = None
    architecture: str | None = None
    javafx_bundled: bool = False
    size: int = 0
    links: Links = field(default_factory=Links)

    @classmethod
    def from_json(cls, data: Mapping[str, object]) -> Package | None:
        """Build from a catalog entry.

        None if the id or filename is missing, or isn't a plain file name: both
        are used as names inside the cache directory.
        """
        id_ = get_str(data, "id")
        filename = get_str(data, "filename")
        if id_ is None or filename is None or not _plain_name(id_) or not _plain_name(filename):
            return None
        pkg = cls(
            id=id_,
            filename=filename,
            major_version=get_int(data, "major_version"),
            jdk_version=get_int(data, "jdk_version"),
            java_version=get_str(data, "java_version"),
            archive_type=get_str(data, "archive_type"),
            distribution=get_str(data, "distribution"),
            operating_system=get_str(data, "operating_system"),
            lib_c_type=get_str(data, "lib_c_type"),
            architecture=get_str(data, "architecture"),
            javafx_bundled=get_bool(data, "javafx_bundled"),
            size=get_int(data, "size"),
            links=Links.from_json(get_table(data, "links") or {}),
        )
        return pkg if _plain_name(pkg.extracted_name) else None

    def to_json(self) -> StrDict:
        return {
            "id": self.id,
            "major_version": self.major_version,
            "jdk_version": self.jdk_version,
            "javafx_bundled": self.javafx_bundled,
            "filename": self.filename,
            "links": self.links.to_json(),
            "size": self.size,
            "java_version": self.java_version,
            "archive_type": self.archive_type,
            "distribution": self.distribution,
            "operating_system": self.operating_system,
            "lib_c_type": self.lib_c_type,
            "architecture": self.architecture,
        }

    @property
    def version(self) -> JavaVersion | None:
        return JavaVersion.parse_or_none(self.java_version)

    @property
    def archive(self) -> Archive | None:
        return Archive.by_key(self.archive_type) or Archive.by_filename(self.filename)

    @property
    def distro(self) -> Distro | None:
        return Distro.by_key(self.distribution)

    @property
    def os(self) -> OS | None:
        return OS.by_key(self.operating_system)

    @property
    def libc(self) -> LibC | None:
        return LibC.by_key(self.lib_c_type)

    @property
    def arch(self) -> Arch | None:
        return Arch.by_key(self.architecture)

    @property
    def extracted_name(self) -> str:
        """Directory name for the unpacked archive: the filename minus its extension."""
        if self.filename.endswith(".tar.gz"):
            return self.filename[: -len(".tar.gz")]
        stem, dot, _ = self.filename.rpartition(".")
        return stem if dot else self.filename

    def __str__(self) -> str:
        return self.filename


def _cmp_rank(a: Distro | LibC | None, b: Distro | LibC | None, order: list[object]) -> int:
    if a is None or b is None:
        if a is b:
            return 0
        return 1 if a is None else -1
    ia, ib = order.index(a), order.index(b)
    return (ia > ib) - (ia < ib)


_DISTRO_ORDER: list[object] = list(Distro)
_LIBC_ORDER: list[object] = list(LibC)


def compare_packages(a: Package, b: Package) -> int:
    """Presentation order: newest JDK, preferred distro, libc, newest build."""
    if a.jdk_version != b.jdk_version:
        return 1 if a.jdk_version < b.jdk_version else -1
    ret = _cmp_rank(a.distro, b.distro, _DISTRO_ORDER)
    if ret:
        return ret
    ret = _cmp_rank(a.libc, b.libc, _LIBC_ORDER)
    if ret:
        return ret

    va, vb = a.version, b.version
    if va is None or vb is None:
        if va is vb:
            return 0
        return 1 if va is None else -1
    return va.compare_to(vb)


def sort_packages(packages: list[Package]) -> list[Package]:
    return sorted(packages, key=functools.cmp_to_key(compare_packages))


@dataclass(frozen=True, slots=True)
class PackageInfo:
    """Download details for one package (``GET /ids/{id}``)."""

    filename: str | None = None
    direct_download_uri: str | None = None
    download_site_uri: str | None = None
    signature_uri: str | None = None
    checksum_uri: str | None = None
    checksum: str | None = None
    checksum_type: str | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, object]) -> PackageInfo:
        return cls(
            filename=get_str(data, "filename"),
            direct_download_uri=get_str(data, "direct_download_uri"),
            download_site_uri=get_str(data, "download_site_uri"),
            signature_uri=get_str(data, "signature_uri"),
            checksum_uri=get_str(data, "checksum_uri"),
            checksum=get_str(data, "checksum"),
            checksum_type=get_str(data, "checksum_type"),
        )

    def to_json(self) -> StrDict:
        return {
            "filename": self.filename,
            "direct_download_uri": self.direct_download_uri,
            "download_site_uri": self.download_site_uri,
            "signature_uri": self.signature_uri,
            "checksum_uri": self.checksum_uri,
            "checksum": self.checksum,
            "checksum_type": self.checksum_type,
        }


@dataclass(frozen=True, slots=True)
class DownloadInfo:
    """Everything known about a downloaded package, cached as ``<id>.json``."""

    pkg: Package
    info: PackageInfo

    @classmethod
    def from_json(cls, data: Mapping[str, object]) -> DownloadInfo | None:
        pkg = Package.from_json(get_table(data, "pkg") or {})
        info = get_table(data, "info")
        if pkg is None or info is None:
            return None
        return cls(pkg=pkg, info=PackageInfo.from_json(info))

    def to_json(self) -> StrDict:
        return {"pkg": self.pkg.to_json(), "info": self.info.to_json()}


def parse_envelope(data: Mapping[str, object]) -> list[StrDict]:
    """Entries of a ``{"message": ..., "result": [...]}`` response."""
    result = get_list(data, "result") or []
    return [entry for item in result if (entry := as_str_dict(item)) is not None]


def dump_json(data: object) -> str:
    """Pretty JSON with empty strings written as null."""
    return json.dumps(blank_to_none(data), indent=2) + "\n"


def load_json(path: Path) -> object | None:
    """Parse a cache file, or None if it is missing or not valid JSON."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
