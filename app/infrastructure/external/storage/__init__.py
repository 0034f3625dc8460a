"""Storage: local filesystem backend for user avatars.

Implementations follow StorageProtocol (put, delete, exists, url).
"""

from app.infrastructure.external.storage.factory import StorageFactory
from app.infrastructure.external.storage.local_storage import LocalStorageService
from app.infrastructure.external.storage.protocol import StorageProtocol

__all__ = [
    "LocalStorageService",
    "StorageFactory",
    "StorageProtocol",
]
