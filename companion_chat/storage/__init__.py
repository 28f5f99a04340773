"""Storage backends for Companion Chat."""

from fastapi import Request

from .base import DuplicateUsernameError, Storage, StorageError
from .database import DatabaseStorage
from .memory import MemoryStorage


def create_storage(settings) -> Storage:
    """Build the backend named by ``settings.storage_backend``."""
    if settings.storage_backend == "memory":
        print("[STORAGE] Using in-memory storage (data is not persisted)")
        return MemoryStorage()
    return DatabaseStorage.from_url(settings.database_url)


def get_storage(request: Request) -> Storage:
    """Dependency returning the application's storage backend."""
    return request.app.state.storage


__all__ = [
    "DatabaseStorage",
    "DuplicateUsernameError",
    "MemoryStorage",
    "Storage",
    "StorageError",
    "create_storage",
    "get_storage",
]
