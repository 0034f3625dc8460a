"""Storage service factory: creates the local backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.infrastructure.external.storage.protocol import StorageProtocol

if TYPE_CHECKING:
    from app.core.config import Settings


class StorageFactory:
    """Factory for storage service instances based on configuration."""

    @staticmethod
    def create_storage_service(settings: "Settings | None" = None) -> StorageProtocol:
        """Create storage service from settings.

        Args:
            settings: Application settings; if None, uses get_settings().

        Returns:
            LocalStorageService rooted at STORAGE_ROOT.

        Raises:
            ValueError: Missing required config.
        """
        from app.core.config import get_settings
        from app.infrastructure.external.storage.local_storage import (
            LocalStorageService,
        )

        s = settings or get_settings()
        if not s.storage_root:
            raise ValueError("STORAGE_ROOT required for local storage")
        return LocalStorageService(
            storage_root=s.storage_root,
            base_url=s.storage_base_url,
        )
