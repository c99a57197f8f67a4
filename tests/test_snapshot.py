from __future__ import annotations

import hashlib
from pathlib import Path

import portalocker
import pytest

from conftest import VI_CATALOG
from tscat import locks, snapshot


def test_locked_read_file_snapshot(tmp_path: Path) -> None:
    path = tmp_path / VI_CATALOG.name
    path.write_bytes(VI_CATALOG.read_bytes())
    read = snapshot.locked_read_file(path)
    assert read.bytes == VI_CATALOG.read_bytes()
    assert read.sha256 == hashlib.sha256(read.bytes).hexdigest()
    assert read.size == len(read.bytes)
    assert locks.catalog_lock_path(path) == tmp_path / ".drawpile_vi.ts.lock"


def test_locked_read_file_refuses_held_lock(tmp_path: Path) -> None:
    path = tmp_path / VI_CATALOG.name
    path.write_bytes(VI_CATALOG.read_bytes())
    with locks.acquire_file_lock(locks.catalog_lock_path(path)):
        with pytest.raises(portalocker.exceptions.LockException):
            snapshot.locked_read_file(path)
