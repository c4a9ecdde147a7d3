"""In-process key-value store adapter."""

import threading

from singletask.errors import PersistenceError


class MemoryTransaction:
    """Buffered writes against a MemoryStore, applied on commit."""

    def __init__(self, store: "MemoryStore", writable: bool):
        self._store = store
        self._writable = writable
        self._staged: dict[str, str] = {}
        self._done = False

    def get(self, key: str) -> str | None:
        self._check_open()
        if key in self._staged:
            return self._staged[key]
        with self._store._lock:
            return self._store._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._check_open()
        if not self._writable:
            raise PersistenceError("Cannot write in a read-only transaction")
        self._staged[key] = value

    def commit(self) -> None:
        self._check_open()
        with self._store._lock:
            self._store._data.update(self._staged)
        self._done = True

    def _check_open(self) -> None:
        if self._done:
            raise PersistenceError("Transaction already committed")


class MemoryStore:
    """
    Dict-backed store.

    Implements KeyValueStore protocol. Contents live for the life of the
    process; used when no cache path is configured and in tests.
    """

    def __init__(self):
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def begin(self, writable: bool) -> MemoryTransaction:
        return MemoryTransaction(self, writable)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)
