"""
Cross-process file lock for the JSON repository.

Uses an O_CREAT|O_EXCL lock file next to the data files holding the
owner's PID; blocks until acquired or timeout. A lock whose owner process
is gone is reclaimed.
"""

from __future__ import annotations

import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..utils.logger import get_logger

logger = get_logger(__name__)

LOCK_TIMEOUT_SECONDS = 30
LOCK_POLL_INTERVAL = 0.05


def _read_owner(path: Path) -> Optional[int]:
    try:
        return int(path.read_text(encoding="utf-8").strip())
    except (OSError, ValueError):
        # missing, or created but not yet written by its owner
        return None


def _process_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


def _reclaim_if_stale(path: Path) -> bool:
    owner = _read_owner(path)
    if owner is None or owner == os.getpid() or _process_alive(owner):
        return False
    logger.warning("Reclaiming stale lock", path=str(path), owner_pid=owner)
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    return True


@contextmanager
def acquire_lock(path: Path, timeout_seconds: float = LOCK_TIMEOUT_SECONDS) -> Iterator[None]:
    path.parent.mkdir(parents=True, exist_ok=True)
    start = time.monotonic()
    while True:
        try:
            fd = os.open(str(path), os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            if _reclaim_if_stale(path):
                continue
            if (time.monotonic() - start) >= timeout_seconds:
                raise TimeoutError(f"Could not acquire lock {path} within {timeout_seconds}s")
            time.sleep(LOCK_POLL_INTERVAL)
            continue
        try:
            os.write(fd, str(os.getpid()).encode())
        finally:
            os.close(fd)
        break
    try:
        yield
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
