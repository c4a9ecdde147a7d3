"""Transactional key-value storage interface."""

from typing import Protocol


class Transaction(Protocol):
    """A unit of work against a KeyValueStore."""

    def get(self, key: str) -> str | None:
        """Read the serialized value for a key. Returns None if not found."""
        ...

    def set(self, key: str, value: str) -> None:
        """Stage a write. Raises PersistenceError on read-only transactions."""
        ...

    def commit(self) -> None:
        """Make staged writes visible."""
        ...


class KeyValueStore(Protocol):
    """Interface for the store behind the task cache."""

    def begin(self, writable: bool) -> Transaction:
        """Open a transaction."""
        ...
