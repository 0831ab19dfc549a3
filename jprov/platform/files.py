"""Filesystem helpers shared by the catalog cache and the extractor."""

from __future__ import annotations

import os
import shutil
import tempfile
import time
from pathlib import Path

__all__ = [
    "atomic_write_bytes",
    "atomic_write_text",
    "file_age_seconds",
    "is_within",
    "remove_tree",
]


def _umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def atomic_write_bytes(path: Path, content: bytes) -> None:
    """Write bytes next to ``path`` and move them into place.

    Readers of a cached catalog snapshot never see a half-written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(content)
        # mkstemp creates 0600; give the file the mode open() would have
        os.chmod(tmp_path, 0o666 & ~_umask())
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    atomic_write_bytes(path, content.encode(encoding))


def file_age_seconds(path: Path, *, now: float | None = None) -> float | None:
    """Seconds since ``path`` was last modified, or None if it doesn't exist."""
    try:
        mtime = path.stat().st_mtime
    except OSError:
        return None
    return (time.time() if now is None else now) - mtime


def is_within(root: Path, path: Path) -> bool:
    """True if ``path`` resolves to ``root`` or somewhere beneath it."""
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True


def remove_tree(path: Path) -> None:
    """Delete a directory tree (or file) if present."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path, ignore_errors=True)
    elif path.exists() or path.is_symlink():
        path.unlink(missing_ok=True)
