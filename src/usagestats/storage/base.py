"""Key-value persistence interface.

Holds small string values that live outside the stats database,
such as the last report timestamp.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStorage(ABC):
    """Abstract string key-value store."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Get the value stored under key, or None if absent."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass


class MemoryStorage(KeyValueStorage):
    """Process-local storage; contents are lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
