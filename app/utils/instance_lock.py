"""
Single-instance guard.

Holds an exclusive advisory ``flock`` on a lock file for the life of the
process. The OS drops the lock when the process dies, so a crashed instance
never leaves a stale lock behind.
"""

import fcntl
import os
from pathlib import Path
from typing import IO

from loguru import logger


class InstanceLock:
    """Non-blocking exclusive file lock."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._file: IO[str] | None = None

    @property
    def acquired(self) -> bool:
        return self._file is not None

    def acquire(self) -> bool:
        """
        Try to take the lock.

        Returns:
            True if this process now owns the lock, False if another
            instance holds it
        """
        if self._file is not None:
            return True

        self.path.parent.mkdir(parents=True, exist_ok=True)
        lock_file = open(self.path, "a+")
        try:
            fcntl.flock(lock_file, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            lock_file.close()
            logger.warning(f"Another instance holds {self.path}")
            return False

        lock_file.seek(0)
        lock_file.truncate()
        lock_file.write(str(os.getpid()))
        lock_file.flush()
        self._file = lock_file
        logger.info(f"Instance lock acquired: {self.path} (pid {os.getpid()})")
        return True

    def release(self) -> None:
        """Release the lock if held."""
        if self._file is None:
            return
        try:
            fcntl.flock(self._file, fcntl.LOCK_UN)
        finally:
            self._file.close()
            self._file = None
        logger.info(f"Instance lock released: {self.path}")

    def __enter__(self) -> "InstanceLock":
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
