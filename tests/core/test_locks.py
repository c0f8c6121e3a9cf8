"""Tests for ReadWriteLock."""

from __future__ import annotations

import threading
import time

from mcpkit.core.locks import ReadWriteLock


class TestReadWriteLock:
    def test_readers_share(self) -> None:
        lock = ReadWriteLock()
        inside = threading.Barrier(2, timeout=5)
        errors: list[BaseException] = []

        def reader() -> None:
            try:
                with lock.read():
                    inside.wait()
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)
        assert errors == []

    def test_writer_excludes_readers(self) -> None:
        lock = ReadWriteLock()
        events: list[str] = []
        writer_in = threading.Event()

        def writer() -> None:
            with lock.write():
                writer_in.set()
                time.sleep(0.05)
                events.append("write-done")

        def reader() -> None:
            writer_in.wait(5)
            with lock.read():
                events.append("read")

        w = threading.Thread(target=writer)
        r = threading.Thread(target=reader)
        w.start()
        r.start()
        w.join(5)
        r.join(5)
        assert events == ["write-done", "read"]

    def test_released_after_exception(self) -> None:
        lock = ReadWriteLock()
        try:
            with lock.write():
                raise ValueError("boom")
        except ValueError:
            pass
        with lock.write():
            pass
        with lock.read():
            pass
