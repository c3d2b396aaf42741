# File: src/mstair/textdump/base/test_rw_lock.py
"""
Tests for ReaderWriterLock.

Covers:
- Readers share the lock
- A writer excludes readers and other writers
- A waiting writer blocks new readers
- Unbalanced releases raise
"""

from __future__ import annotations

import threading
import time

import pytest

from mstair.textdump.base.rw_lock import ReaderWriterLock


class TestSharing:
    def test_readers_share(self) -> None:
        lock = ReaderWriterLock()
        inside = threading.Barrier(3, timeout=5)

        def reader() -> None:
            with lock.read_locked():
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        inside.wait()
        for t in threads:
            t.join(timeout=5)
        assert not any(t.is_alive() for t in threads)

    def test_writer_excludes_reader(self) -> None:
        lock = ReaderWriterLock()
        events: list[str] = []
        lock.acquire_write()

        def reader() -> None:
            with lock.read_locked():
                events.append("read")

        t = threading.Thread(target=reader)
        t.start()
        time.sleep(0.05)
        events.append("write-done")
        lock.release_write()
        t.join(timeout=5)
        assert events == ["write-done", "read"]

    def test_waiting_writer_blocks_new_readers(self) -> None:
        lock = ReaderWriterLock()
        events: list[str] = []
        lock.acquire_read()

        def writer() -> None:
            with lock.write_locked():
                events.append("write")

        def late_reader() -> None:
            with lock.read_locked():
                events.append("late-read")

        w = threading.Thread(target=writer)
        w.start()
        time.sleep(0.05)
        r = threading.Thread(target=late_reader)
        r.start()
        time.sleep(0.05)
        lock.release_read()
        w.join(timeout=5)
        r.join(timeout=5)
        assert events == ["write", "late-read"]


class TestMisuse:
    def test_release_read_without_acquire(self) -> None:
        with pytest.raises(RuntimeError):
            ReaderWriterLock().release_read()

    def test_release_write_without_acquire(self) -> None:
        with pytest.raises(RuntimeError):
            ReaderWriterLock().release_write()

    def test_lock_released_after_exception(self) -> None:
        lock = ReaderWriterLock()
        with pytest.raises(KeyError), lock.write_locked():
            raise KeyError("x")
        with lock.write_locked():
            pass
        assert "writer=False" in repr(lock)


# End of file: src/mstair/textdump/base/test_rw_lock.py
