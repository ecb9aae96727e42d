"""Tests for expander/locking.py — RWLock."""

import threading
import time

from spandex.expander.locking import RWLock


class TestRWLock:
    """Tests for shared()/exclusive()."""

    def test_readers_share(self):
        lock = RWLock()
        inside = threading.Barrier(2, timeout=5)

        def _reader():
            with lock.shared():
                # Both readers must be inside at once to pass the barrier.
                inside.wait()

        threads = [threading.Thread(target=_reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)

        assert not any(t.is_alive() for t in threads)

    def test_writer_excludes_readers(self):
        lock = RWLock()
        events: list[str] = []

        with lock.exclusive():
            reader = threading.Thread(
                target=lambda: _record(lock, events, "read")
            )
            reader.start()
            time.sleep(0.05)
            events.append("write-done")

        reader.join(5)
        assert events == ["write-done", "read"]

    def test_writer_waits_for_reader(self):
        lock = RWLock()
        events: list[str] = []

        with lock.shared():
            writer = threading.Thread(
                target=lambda: _record_exclusive(lock, events, "write")
            )
            writer.start()
            time.sleep(0.05)
            events.append("read-done")

        writer.join(5)
        assert events == ["read-done", "write"]

    def test_lock_released_on_error(self):
        lock = RWLock()
        try:
            with lock.exclusive():
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        with lock.shared():
            pass
        with lock.exclusive():
            pass


def _record(lock, events, label):
    with lock.shared():
        events.append(label)


def _record_exclusive(lock, events, label):
    with lock.exclusive():
        events.append(label)
