from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, List, Sequence

from .models import InventoryItem


class ReadWriteLock:
    """
    Many readers or a single writer. Once a writer is waiting, new readers
    queue behind it so the writer cannot be starved.
    """

    def __init__(self):
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
    def read(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class InventoryStore:
    """
    In-memory inventory shared by the loader and the request handlers.
    Items are kept in insertion order. There is no update or delete path.
    """

    def __init__(self):
        self._items: List[InventoryItem] = []
        self._lock = ReadWriteLock()

    def append(self, item: InventoryItem) -> None:
        with self._lock.write():
            self._items.append(item)

    @contextmanager
    def reading(self) -> Iterator[Sequence[InventoryItem]]:
        """
        Hold the shared lock and expose the live item list. Callers must not
        mutate it or keep it past the with-block.
        """
        with self._lock.read():
            yield self._items

    def snapshot(self) -> List[InventoryItem]:
        with self._lock.read():
            return list(self._items)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._items)
