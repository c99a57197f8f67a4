from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import hashlib

from tscat import locks


@dataclass(frozen=True)
class LockedRead:
    file_path: str
    bytes: bytes
    sha256: str
    mtime_ns: int
    size: int


def _read_file_snapshot_unlocked(file_path: Path) -> LockedRead:
    data = file_path.read_bytes()
    stat = file_path.stat()
    return LockedRead(
        file_path=str(file_path),
        bytes=data,
        sha256=hashlib.sha256(data).hexdigest(),
        mtime_ns=stat.st_mtime_ns,
        size=stat.st_size,
    )


def locked_read_file(file_path: Path, lock_path: Path | None = None) -> LockedRead:
    with locks.acquire_file_lock(lock_path or locks.catalog_lock_path(file_path)):
        return _read_file_snapshot_unlocked(file_path)
