"""Key-value storage port (abstract interface).

Models the browser-style persisted store the storefront keeps its cart,
session fields and last order in: string keys mapped to string values, with
whole-value overwrites and no transactions. Writers sharing one backing
store follow last-write-wins.
"""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Raised by adapters when the backing medium cannot be read or written."""


class KeyValueStorage(ABC):
    """Abstract string key-value store."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Overwrite the value stored under ``key``."""
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``. Removing an absent key is not an error."""
        ...

    @abstractmethod
    def keys(self) -> list[str]:
        """Return every key currently stored."""
        ...

    def clear(self) -> None:
        for key in self.keys():
            self.remove_item(key)
