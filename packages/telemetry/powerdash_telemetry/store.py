"""Shared snapshot store written by both samplers and read by the renderer."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Iterator

from .models import SNAPSHOT_FIELDS, PowerSnapshot


class ReadWriteLock:
    """Many readers or one writer. Waiting writers block new readers."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class SnapshotStore:
    """Latest known value of every telemetry field.

    Fields are last-write-wins and never reset. All fields passed to a single
    :meth:`update` become visible to :meth:`snapshot` together.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._data = PowerSnapshot()

    def update(self, **changes: Any) -> None:
        unknown = set(changes) - SNAPSHOT_FIELDS
        if unknown:
            raise ValueError(f"unknown snapshot fields: {sorted(unknown)}")
        if not changes:
            return
        with self._lock.write_locked():
            for name, value in changes.items():
                setattr(self._data, name, value)

    def snapshot(self) -> PowerSnapshot:
        with self._lock.read_locked():
            return replace(self._data)
