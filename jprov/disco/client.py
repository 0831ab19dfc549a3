"""Client for the foojay Disco API (https://github.com/foojayio/discoapi).

Everything lives in one cache directory::

    <cache>/packages.json            catalog snapshot, refetched after 12 hours
    <cache>/<id>.json                {pkg, info} for packages we looked at
    <cache>/<filename>               downloaded archives
    <cache>/<filename minus ext>/    extracted JDKs

Package metadata and archives never expire. The cache directory belongs to a
single invocation at a time; nothing here locks it.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from jprov.core.config import DEFAULT_DISCO_URL
from jprov.core.result import Err, Ok, Result
from jprov.output.console import ConsoleProtocol, NullConsole
from jprov.platform.detection import OS, Arch, LibC, PlatformInfo, detect
from jprov.platform.distro import Distro
from jprov.platform.files import atomic_write_text, file_age_seconds, is_within, remove_tree

from .errors import (
    ChecksumMismatch,
    DiscoError,
    ExtractionFailed,
    NetworkFailure,
    NotFound,
    Offline,
)
from .extract import Extractor
from .hashing import HashFunction
from .http import HttpClient, HttpError, RealHttpClient
from .model import (
    DownloadInfo,
    Package,
    PackageInfo,
    dump_json,
    load_json,
    parse_envelope,
    sort_packages,
)

__all__ = ["CACHE_TIMEOUT", "Disco", "filter_packages"]

CACHE_TIMEOUT = 12 * 60 * 60

_PACKAGE_QUERY = (
    "/packages/?"
    "&package_type=jdk"
    "&directly_downloadable=true"
    "&archive_type=zip,tar,tar.gz,tgz"
)


def filter_packages(
    packages: list[Package],
    version: int = -1,
    *,
    os: OS | None = None,
    distro: Distro | None = None,
    arch: Arch | None = None,
    libc: LibC = LibC.GLIBC,
) -> list[Package]:
    """Narrow a catalog down to what can run here, best first.

    ``None`` filters match anything and ``version=-1`` means "the newest
    major version available". MUSL builds are only kept when ``libc`` is MUSL.
    """
    matched: list[Package] = []
    for pkg in packages:
        if version != -1 and pkg.jdk_version != version:
            continue
        if os is not None and pkg.os != os:
            continue
        if distro is not None and pkg.distro != distro:
            continue
        if arch is not None and not arch.accepts(pkg.arch):
            continue
        # the catalog's libc tag is the only signal we have
        if libc != LibC.MUSL and pkg.libc == LibC.MUSL:
            continue
        matched.append(pkg)

    if version == -1 and matched:
        newest = max(pkg.jdk_version for pkg in matched)
        matched = [pkg for pkg in matched if pkg.jdk_version == newest]

    return sort_packages(matched)


def _network_failure(error: HttpError) -> DiscoError:
    if error.not_found:
        return NotFound(error.url)
    return NetworkFailure(url=error.url, message=error.message, status=error.status)


class Disco:
    """Catalog client with an on-disk cache.

    Usage:
        disco = Disco(cache_dir)
        match disco.extract(pkg):
            case Ok(home):
                print(home)
            case Err(error):
                print(error)
    """

    def __init__(
        self,
        cache: Path,
        *,
        url: str = DEFAULT_DISCO_URL,
        offline: bool = False,
        http: HttpClient | None = None,
        console: ConsoleProtocol | None = None,
        platform: PlatformInfo | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache = cache
        self.url = url.rstrip("/")
        self.offline = offline
        self._http = http or RealHttpClient()
        self._console = console or NullConsole()
        self._platform = platform
        self._clock = clock

    @property
    def platform(self) -> PlatformInfo:
        if self._platform is None:
            self._platform = detect()
        return self._platform

    @property
    def packages_url(self) -> str:
        return self.url + _PACKAGE_QUERY

    def info_url(self, pkg: Package) -> str:
        return f"{self.url}/ids/{pkg.id}"

    def _fresh(self, path: Path) -> bool:
        age = file_age_seconds(path, now=self._clock())
        return age is not None and age < CACHE_TIMEOUT

    def _read_packages(self, path: Path) -> list[Package] | None:
        data = load_json(path)
        if not isinstance(data, list):
            if path.exists():
                self._console.debug(f"Can not read cache file: {path}")
            return None
        packages = [pkg for item in data if isinstance(item, dict) and (pkg := Package.from_json(item))]
        return packages or None

    # -- catalog -----------------------------------------------------------

    def get_packages(self) -> Result[list[Package], DiscoError]:
        """The whole catalog, from cache when younger than 12 hours."""
        cached = self.cache / "packages.json"
        if self._fresh(cached):
            packages = self._read_packages(cached)
            if packages is not None:
                return Ok(packages)

        if self.offline:
            return Err(Offline("package list"))

        url = self.packages_url
        self._console.debug("Downloading package list")
        result = self._http.get_json(url)
        if isinstance(result, Err):
            self._console.error(f"Failed to download package list: {result.error}")
            return Err(_network_failure(result.error))

        packages = [pkg for entry in parse_envelope(result.value) if (pkg := Package.from_json(entry))]
        if not packages:
            self._console.error(f"Failed to download any packages from {url}")
            return Err(NotFound(url))

        atomic_write_text(cached, dump_json([pkg.to_json() for pkg in packages]))
        return Ok(packages)

    def find_packages(
        self,
        version: int = -1,
        *,
        os: OS | None = None,
        distro: Distro | None = None,
        arch: Arch | None = None,
    ) -> Result[list[Package], DiscoError]:
        """Catalog entries matching the filters, best first (see filter_packages)."""
        result = self.get_packages()
        if isinstance(result, Err):
            return result
        return Ok(
            filter_packages(
                result.value,
                version,
                os=os,
                distro=distro,
                arch=arch,
                libc=self.platform.libc,
            )
        )

    def packages_for(self, version: int) -> Result[list[Package], DiscoError]:
        """Temurin packages for this OS and architecture."""
        return self.find_packages(
            version,
            os=self.platform.os,
            distro=Distro.TEMURIN,
            arch=self.platform.arch,
        )

    def get_info(self, pkg: Package) -> Result[PackageInfo, DiscoError]:
        """Download details for ``pkg``, cached forever as ``<id>.json``."""
        cached = self.cache / f"{pkg.id}.json"
        data = load_json(cached)
        if isinstance(data, dict):
            known = DownloadInfo.from_json(data)
            if known is not None:
                return Ok(known.info)

        if self.offline:
            return Err(Offline(f"package info for {pkg.id}"))

        url = self.info_url(pkg)
        result = self._http.get_json(url)
        if isinstance(result, Err):
            return Err(_network_failure(result.error))

        entries = parse_envelope(result.value)
        if not entries:
            self._console.error(f"Failed to download package info for {pkg.id}")
            return Err(NotFound(url))
        if len(entries) != 1:
            self._console.debug(f"Warning: Multiple package infos returned from {url}")

        info = PackageInfo.from_json(entries[0])
        atomic_write_text(cached, dump_json(DownloadInfo(pkg=pkg, info=info).to_json()))
        return Ok(info)

    # -- archives ----------------------------------------------------------

    def _checksums(self, pkg: Package, info: PackageInfo) -> dict[HashFunction, str]:
        checksums: dict[HashFunction, str] = {}
        if info.checksum is not None and info.checksum_type is not None:
            func = HashFunction.find(info.checksum_type)
            if func is not None:
                checksums[func] = info.checksum.lower()
            else:
                self._console.debug(f"Unknown Checksum {info.checksum_type}: {info.checksum}")
        elif info.checksum_uri is not None and not self.offline:
            result = self._http.get_text(info.checksum_uri)
            if isinstance(result, Err):
                self._console.debug(f"Failed to download checksum for {pkg.filename}: {result.error}")
            elif tokens := result.value.split():
                func = HashFunction.find_by_hash(tokens[0])
                if func is not None:
                    checksums[func] = tokens[0].lower()
                else:
                    self._console.debug(f"Unknown Checksum {tokens[0]}")
        return checksums

    def _verify(self, archive: Path, checksums: dict[HashFunction, str]) -> Result[Path, DiscoError]:
        if not checksums:
            self._console.debug("    No checksum found, assuming existing file is valid")
            return Ok(archive)

        self._console.debug("Verifying checksums")
        for func, expected in checksums.items():
            try:
                actual = func.hash_file(archive)
            except OSError as e:
                self._console.error(f"Failed to calculate {func.name} checksum: {e}")
                return Err(ExtractionFailed(archive=archive, message=str(e)))
            if actual != expected:
                self._console.debug(f"    {func.name} Invalid")
                self._console.debug(f"        Expected: {expected}")
                self._console.debug(f"        Actual:   {actual}")
                return Err(
                    ChecksumMismatch(path=archive, algorithm=func.name, expected=expected, actual=actual)
                )
            self._console.debug(f"    {func.name} Validated")
        return Ok(archive)

    def download(self, pkg: Package) -> Result[Path, DiscoError]:
        """Fetch the archive for ``pkg`` (unless cached) and verify it."""
        checksums: dict[HashFunction, str] = {}
        link = pkg.links.pkg_download_redirect

        info = self.get_info(pkg)
        if isinstance(info, Err):
            self._console.debug(
                f'Failed to download package info for "{pkg.filename}" ({pkg.id}), '
                "assuming redirect link is valid"
            )
        else:
            checksums = self._checksums(pkg, info.value)
            link = info.value.direct_download_uri or link

        archive = self.cache / pkg.filename
        if not archive.exists():
            if self.offline:
                self._console.error(f"Offline mode, can't download {pkg.filename} ({pkg.id})")
                return Err(Offline(pkg.filename))
            if link is None:
                self._console.error(f"Failed to find download link for {pkg.filename} ({pkg.id})")
                return Err(NotFound(f"download link for {pkg.filename}"))

            self._console.debug(f"Downloading {link}")
            result = self._http.download(link, archive)
            if isinstance(result, Err):
                self._console.error(f"Failed to download {pkg.filename} from {link}")
                return Err(_network_failure(result.error))

        verified = self._verify(archive, checksums)
        if isinstance(verified, Err) and isinstance(verified.error, ChecksumMismatch):
            # a corrupt archive must not satisfy the next run's cache check
            archive.unlink(missing_ok=True)
        return verified

    def extracted_dir(self, pkg: Package) -> Path:
        return self.cache / pkg.extracted_name

    def _discard(self, target: Path) -> None:
        """Remove a half-extracted ``target``; never anything outside the cache."""
        if target.resolve() != self.cache.resolve() and is_within(self.cache, target):
            remove_tree(target)

    def extract(self, pkg: Package) -> Result[Path, DiscoError]:
        """Download and unpack ``pkg``; returns the JDK home directory.

        A directory that already holds ``bin/java`` is returned as is.
        """
        exe_name = "bin/" + (pkg.os or self.platform.os).exe_name("java")
        target = self.extracted_dir(pkg)
        if (target / exe_name).exists():
            return Ok(target)

        archive = self.download(pkg)
        if isinstance(archive, Err):
            return archive

        self._console.debug(f"Extracting {archive.value} to: {target}")
        result = Extractor(exe_name).extract(archive.value, target.absolute(), pkg.archive)
        if isinstance(result, Err):
            self._console.error(str(result.error))
            self._discard(target)
            return result

        if not (target / exe_name).exists():
            self._console.error(
                f"    Extracting failed to produce expected java executable: {target / exe_name}"
            )
            self._discard(target)
            return Err(ExtractionFailed(archive=archive.value, message=f"no {exe_name} in archive"))

        return Ok(target)
