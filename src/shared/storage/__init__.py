"""Storage adapter factory.

Provides get_storage() / set_storage() / reset_storage() to swap backends:
- MemoryStorage for development and testing (default)
- FileStorage for a cart that survives restarts and is shared across processes

The adapter and its file path come from ``Settings`` (STOREFRONT_STORAGE and
STOREFRONT_STORAGE_PATH when read from the environment).
"""

from shared.config import Settings
from shared.storage.port import KeyValueStorage, StorageError

_current_storage: KeyValueStorage | None = None


def get_storage(settings: Settings | None = None) -> KeyValueStorage:
    """Return the current storage adapter, creating it from ``settings`` on first use.

    Without settings, they are read from the environment. Defaults to
    MemoryStorage.
    """
    global _current_storage
    if _current_storage is None:
        settings = settings or Settings.from_env()
        adapter = settings.storage_adapter
        if adapter == "memory":
            from shared.storage.memory_adapter import MemoryStorage

            _current_storage = MemoryStorage()
        elif adapter == "file":
            from shared.storage.file_adapter import FileStorage

            _current_storage = FileStorage(settings.storage_path)
        else:
            raise ValueError(f"Unknown storage adapter: {adapter}")
    return _current_storage


def set_storage(storage: KeyValueStorage) -> None:
    """Override the active storage adapter (useful for tests)."""
    global _current_storage
    _current_storage = storage


def reset_storage() -> None:
    """Reset to default storage."""
    global _current_storage
    _current_storage = None


__all__ = ["KeyValueStorage", "StorageError", "get_storage", "reset_storage", "set_storage"]
