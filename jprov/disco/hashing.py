"""Checksum algorithms the catalog hands out."""

from __future__ import annotations

import hashlib
from enum import Enum
from pathlib import Path

__all__ = ["HashFunction"]

_CHUNK = 1024 * 1024


class HashFunction(Enum):
    """A digest algorithm and the length of its hex form."""

    MD5 = ("md5", 32)
    SHA1 = ("sha1", 40)
    SHA256 = ("sha256", 64)
    SHA512 = ("sha512", 128)

    def __init__(self, algorithm: str, hex_length: int) -> None:
        self.algorithm = algorithm
        self.hex_length = hex_length

    def hash_file(self, path: Path) -> str:
        """Lowercase hex digest of a file's contents."""
        digest = hashlib.new(self.algorithm)
        with path.open("rb") as f:
            while chunk := f.read(_CHUNK):
                digest.update(chunk)
        return digest.hexdigest()

    @classmethod
    def find(cls, name: str) -> HashFunction | None:
        """Look up by name; ``sha256``, ``SHA-256`` and ``SHA256`` all match."""
        normalized = name.strip().upper().replace("-", "").replace("_", "")
        for value in cls:
            if value.name == normalized:
                return value
        return None

    @classmethod
    def find_by_hash(cls, checksum: str) -> HashFunction | None:
        """Guess the algorithm from the length of a hex digest."""
        for value in cls:
            if value.hex_length == len(checksum):
                return value
        return None
