"""In-memory key-value storage for development and testing.

Two storefront instances sharing one ``MemoryStorage`` behave like two
browser tabs on the same origin.
"""

from shared.storage.port import KeyValueStorage, StorageError


class MemoryStorage(KeyValueStorage):
    """Dict-backed storage with an optional simulated quota."""

    def __init__(self, quota: int | None = None) -> None:
        self._data: dict[str, str] = {}
        self.quota = quota
        self.writes: list[str] = []

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota is not None:
            used = sum(len(v) for k, v in self._data.items() if k != key)
            if used + len(value) > self.quota:
                raise StorageError(f"Storage quota of {self.quota} characters exceeded")
        self._data[key] = value
        self.writes.append(key)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)
