"""
Reader/writer lock and the shared region store handle.

Components only ever read the region store; the controller is the single
writer.  The handle pairs the store with a lock so that a status merge is
never observed half-applied.

Usage
-----
    shared = SharedRegionStore(RegionStore())
    with shared.write() as store:
        store.apply_status(status)
    with shared.read() as store:
        items = store.items
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from .region_store import RegionStore


class ReadWriteLock:
    """Many readers or one writer.  Waiting writers block new readers."""

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


class SharedRegionStore:
    """Lock-guarded handle passed to the controller and every component."""

    def __init__(self, store: RegionStore):
        self._store = store
        self._lock = ReadWriteLock()

    @contextmanager
    def read(self) -> Iterator[RegionStore]:
        with self._lock.read_locked():
            yield self._store

    @contextmanager
    def write(self) -> Iterator[RegionStore]:
        with self._lock.write_locked():
            yield self._store
