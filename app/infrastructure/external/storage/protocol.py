"""Storage service protocol (DIP). Implementation: LocalStorageService."""

from typing import Protocol


class StorageProtocol(Protocol):
    """Protocol for file storage backends used for avatars."""

    async def put(self, path: str, data: bytes) -> str:
        """Write data at path (overwrites). Returns the stored path."""
        ...

    async def delete(self, path: str) -> bool:
        """Delete file. Returns True if deleted, False if not found."""
        ...

    async def exists(self, path: str) -> bool:
        """Return True if file exists."""
        ...

    def url(self, path: str) -> str:
        """Return the public URL under which path is served."""
        ...
