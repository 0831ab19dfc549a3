"""Unpacking JDK archives.

JDK archives usually wrap everything in one top-level directory whose name is
hard to predict (``jdk-17.0.2+8``, ``zulu17.32.13-ca-jdk17.0.2-linux_x64``,
``weird-name-123``). The extractor finds the entry ending in ``bin/java`` and
strips whatever precedes it from every entry, so ``bin/java`` always lands
directly under the target directory. Entries outside that prefix are skipped.

An entry that would be written outside the target directory aborts the whole
extraction with ``UnsafeArchive``.
"""

from __future__ import annotations

import os
import shutil
import struct
import tarfile
import zipfile
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from jprov.core.result import Err, Ok, Result
from jprov.platform.distro import Archive
from jprov.platform.files import is_within

from .errors import ExtractionFailed, UnsafeArchive, UnsupportedArchive

__all__ = [
    "DEFAULT_MODE",
    "ExtractError",
    "Extractor",
    "find_prefix",
    "zip_unix_mode",
]

DEFAULT_MODE = 0o755

# Info-ZIP "ASi Unix" extra field: CRC-32 (4), mode (2), sizdev (4), uid (2), gid (2), link
_ASI_UNIX_TAG = 0x756E

ExtractError = UnsafeArchive | UnsupportedArchive | ExtractionFailed


def zip_unix_mode(extra: bytes) -> int:
    """Permission bits from a zip entry's extra data, ``0o755`` if absent."""
    mode = DEFAULT_MODE
    offset = 0
    while offset + 4 <= len(extra):
        tag, size = struct.unpack_from("<HH", extra, offset)
        offset += 4
        if tag == _ASI_UNIX_TAG and offset + 6 <= len(extra):
            (raw,) = struct.unpack_from("<H", extra, offset + 4)
            mode = raw & 0o777
        offset += size
    return mode


def find_prefix(names: Iterable[str], exe_name: str) -> str | None:
    """Everything before ``exe_name`` in the first entry that ends with it."""
    for name in names:
        normalized = name.replace("\\", "/")
        if normalized.endswith(exe_name):
            return normalized[: -len(exe_name)]
    return None


@dataclass(frozen=True, slots=True)
class _Entry:
    name: str
    mode: int
    is_dir: bool


class _Unsafe(Exception):
    def __init__(self, entry: str) -> None:
        super().__init__(entry)
        self.entry = entry


class Extractor:
    """Extracts zip and tar(.gz) archives into a target directory.

    Usage:
        extractor = Extractor(exe_name="bin/java")
        result = extractor.extract(archive, target, Archive.TAR_GZ)
        if is_ok(result):
            print(f"Extracted {result.value} files")
    """

    def __init__(self, exe_name: str = "bin/java", *, posix: bool | None = None) -> None:
        self.exe_name = exe_name
        self._posix = os.name == "posix" if posix is None else posix

    def extract(
        self, archive: Path, target: Path, archive_type: Archive | None
    ) -> Result[int, ExtractError]:
        """Extract ``archive`` into ``target`` and return the number of files written."""
        try:
            match archive_type:
                case Archive.ZIP:
                    count = self._extract_zip(archive, target)
                case Archive.TAR | Archive.TAR_GZ | Archive.TGZ:
                    count = self._extract_tar(archive, target, gzipped=archive_type.is_gzipped)
                case _:
                    key = archive_type.key if archive_type is not None else None
                    return Err(UnsupportedArchive(archive=archive, format=key))
        except _Unsafe as e:
            return Err(UnsafeArchive(archive=archive, entry=e.entry))
        except (zipfile.BadZipFile, tarfile.TarError) as e:
            return Err(ExtractionFailed(archive=archive, message=f"Corrupt archive: {e}"))
        except (EOFError, OSError) as e:
            return Err(ExtractionFailed(archive=archive, message=f"IO error: {e}"))
        return Ok(count)

    def _destination(self, target: Path, prefix: str | None, entry: _Entry) -> Path | None:
        """Where an entry goes, or None to skip it. Raises _Unsafe on escape."""
        if entry.is_dir:
            return None
        name = entry.name.replace("\\", "/")
        if prefix is not None:
            if not name.startswith(prefix):
                return None
            name = name[len(prefix) :]
        out = target / name
        if not name or not is_within(target, out) or out.resolve() == target.resolve():
            raise _Unsafe(entry.name)
        return out

    def _write(self, out: Path, src: IO[bytes], mode: int) -> None:
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, "wb") as dst:
            shutil.copyfileobj(src, dst)
        if self._posix:
            out.chmod(mode)

    def _extract_zip(self, archive: Path, target: Path) -> int:
        target.mkdir(parents=True, exist_ok=True)
        count = 0
        with zipfile.ZipFile(archive) as zf:
            infos = zf.infolist()
            prefix = find_prefix((info.filename for info in infos), self.exe_name)
            for info in infos:
                entry = _Entry(
                    name=info.filename,
                    mode=zip_unix_mode(info.extra),
                    is_dir=info.is_dir() or info.filename.replace("\\", "/").endswith("/"),
                )
                out = self._destination(target, prefix, entry)
                if out is None:
                    continue
                with zf.open(info) as src:
                    self._write(out, src, entry.mode)
                count += 1
        return count

    def _extract_tar(self, archive: Path, target: Path, *, gzipped: bool) -> int:
        mode = "r:gz" if gzipped else "r:"
        with tarfile.open(archive, mode) as tar:
            prefix = find_prefix((m.name for m in tar), self.exe_name)

        target.mkdir(parents=True, exist_ok=True)
        count = 0
        with tarfile.open(archive, mode) as tar:
            for member in tar:
                entry = _Entry(
                    name=member.name,
                    mode=(member.mode & 0o777) or DEFAULT_MODE,
                    is_dir=member.isdir(),
                )
                out = self._destination(target, prefix, entry)
                if out is None:
                    continue
                src = self._tar_source(tar, member)
                if src is None:
                    continue
                with src:
                    self._write(out, src, entry.mode)
                count += 1
        return count

    def _tar_source(self, tar: tarfile.TarFile, member: tarfile.TarInfo) -> IO[bytes] | None:
        if member.isfile():
            return tar.extractfile(member)
        if not (member.issym() or member.islnk()):
            return None
        # links are materialized as copies of the entry they point to
        try:
            return tar.extractfile(member)
        except KeyError:
            return None
