from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path

import portalocker


def catalog_lock_path(catalog_path: Path) -> Path:
    return catalog_path.parent / f".{catalog_path.name}.lock"


@contextmanager
def acquire_file_lock(lock_path: Path, *, timeout: float = 0):
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = portalocker.Lock(str(lock_path), mode="a+", timeout=timeout)
    lock.acquire()
    try:
        yield lock
    finally:
        lock.release()
