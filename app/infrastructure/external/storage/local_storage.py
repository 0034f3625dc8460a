"""Local filesystem storage with path validation and atomic writes."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import aiofiles
import aiofiles.os

from app.infrastructure.exceptions import (
    StorageDeleteError,
    StoragePermissionError,
    StorageWriteError,
)


class LocalStorageService:
    """Local filesystem storage with atomic writes and path traversal protection.

    Paths are validated against storage_root. Writes use temp file + rename,
    so readers never see a half-written file.
    """

    def __init__(self, storage_root: str, base_url: str = "/storage") -> None:
        """Initialize local storage.

        Args:
            storage_root: Base directory for all files.
            base_url: URL prefix under which storage_root is served.
        """
        self.storage_root = Path(storage_root).resolve()
        self.base_url = base_url.rstrip("/")
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, path: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / path).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(path) from e
        if full_path == self.storage_root:
            raise StoragePermissionError(path)
        return full_path

    async def put(self, path: str, data: bytes) -> str:
        """Write data atomically (temp file in the target dir, then rename)."""
        target_path = self._get_full_path(path)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent,
                prefix=".tmp_",
                suffix=target_path.suffix,
            )
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(data)
                os.chmod(temp_path, 0o640)
                os.replace(temp_path, target_path)
            finally:
                if Path(temp_path).exists():
                    os.unlink(temp_path)
        except OSError as e:
            raise StorageWriteError(path, str(e)) from e
        return path

    async def delete(self, path: str) -> bool:
        """Delete file. Returns True if deleted, False if it did not exist."""
        file_path = self._get_full_path(path)
        if not file_path.exists():
            return False
        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageDeleteError(path, str(e)) from e
        return True

    async def exists(self, path: str) -> bool:
        """Return True if file exists."""
        try:
            return self._get_full_path(path).is_file()
        except StoragePermissionError:
            return False

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"
