# File: src/mstair/textdump/base/rw_lock.py
"""
Reader/writer lock for the process-wide dump caches.

Readers share the lock; a writer excludes readers and other writers. A
waiting writer blocks new readers so that a steady stream of cache lookups
cannot starve an insert.

Example:
    >>> lock = ReaderWriterLock()
    >>> with lock.read_locked():
    ...     value = cache.get(key)
    >>> with lock.write_locked():
    ...     cache[key] = value
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


__all__ = ["ReaderWriterLock"]


class ReaderWriterLock:
    """
    Writer-preferring reader/writer lock built on `threading.Condition`.

    The lock is not reentrant: a thread holding the write lock must not ask
    for the read lock, and a reader must not upgrade. Callers keep their
    critical sections to plain dict/set operations.
    """

    __slots__ = ("_condition", "_readers", "_writer", "_writers_waiting")

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._condition:
            while self._writer or self._writers_waiting:
                self._condition.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._condition:
            if self._readers <= 0:
                raise RuntimeError("release_read() called without a matching acquire_read()")
            self._readers -= 1
            if not self._readers:
                self._condition.notify_all()

    def acquire_write(self) -> None:
        with self._condition:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._condition.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._condition:
            if not self._writer:
                raise RuntimeError("release_write() called without a matching acquire_write()")
            self._writer = False
            self._condition.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """Hold the shared lock for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        """Hold the exclusive lock for the duration of the block."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} readers={self._readers} writer={self._writer}"
            f" writers_waiting={self._writers_waiting}>"
        )


# End of file: src/mstair/textdump/base/rw_lock.py
