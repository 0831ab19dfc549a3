"""JDK distributions and package archive formats known to the catalog."""

from __future__ import annotations

from enum import Enum

__all__ = ["Archive", "Distro"]


class Distro(Enum):
    """JDK distribution.

    Declaration order is the preference order used when ranking packages:
    Temurin first, then its AdoptOpenJDK predecessor, then Zulu.
    """

    TEMURIN = "temurin"
    AOJ = "aoj"
    ZULU = "zulu"
    AOJ_OPENJ9 = "aoj_openj9"
    BISHENG = "bisheng"
    CORRETTO = "corretto"
    DRAGONWELL = "dragonwell"
    GRAALVM_CE8 = "graalvm_ce8"
    GRAALVM_CE11 = "graalvm_ce11"
    GRAALVM_CE16 = "graalvm_ce16"
    GRAALVM_CE17 = "graalvm_ce17"
    GRAALVM_CE19 = "graalvm_ce19"
    GRAALVM_CE20 = "graalvm_ce20"
    GRAALVM_COMMUNITY = "graalvm_community"
    GRAALVM = "graalvm"
    JETBRAINS = "jetbrains"
    KONA = "kona"
    LIBERICA = "liberica"
    LIBERICA_NATIVE = "liberica_native"
    MANDREL = "mandrel"
    MICROSOFT = "microsoft"
    OJDK_BUILD = "ojdk_build"
    OPENLOGIC = "openlogic"
    ORACLE = "oracle"
    ORACLE_OPEN_JDK = "oracle_open_jdk"
    REDHAT = "redhat"
    SAP_MACHINE = "sap_machine"
    SEMERU = "semeru"
    SEMERU_CERTIFIED = "semeru_certified"
    TRAVA = "trava"
    ZULU_PRIME = "zulu_prime"

    @property
    def key(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        return _ORDER[self]

    def __str__(self) -> str:
        return self.value

    @classmethod
    def by_key(cls, key: str | None) -> Distro | None:
        if key is None:
            return None
        try:
            return cls(key)
        except ValueError:
            return None


_ORDER = {distro: index for index, distro in enumerate(Distro)}


class Archive(Enum):
    """Package archive format, keyed by file extension."""

    APK = "apk"
    CAB = "cab"
    DEB = "deb"
    DMG = "dmg"
    EXE = "exe"
    MSI = "msi"
    PKG = "pkg"
    RPM = "rpm"
    TAR = "tar"
    TAR_GZ = "tar.gz"
    TGZ = "tgz"
    ZIP = "zip"

    @property
    def key(self) -> str:
        return self.value

    @property
    def is_gzipped(self) -> bool:
        return self in (Archive.TAR_GZ, Archive.TGZ)

    def __str__(self) -> str:
        return self.value

    @classmethod
    def by_key(cls, key: str | None) -> Archive | None:
        if key is None:
            return None
        try:
            return cls(key)
        except ValueError:
            return None

    @classmethod
    def by_filename(cls, filename: str) -> Archive | None:
        """Archive type from a filename extension, or None."""
        lowered = filename.lower()
        for archive in cls:
            if lowered.endswith("." + archive.key):
                return archive
        return None
