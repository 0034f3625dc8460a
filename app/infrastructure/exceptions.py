"""Infrastructure exceptions for storage and external operations.

Storage errors extend OrgChartException so presentation can map them
to HTTP responses consistently.
"""

from app.domain.exceptions import OrgChartException


class StorageException(OrgChartException):
    """Base exception for storage operations."""


class StorageWriteError(StorageException):
    """File write failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to store file: {file_path}",
            "STORAGE_WRITE_ERROR",
        )
        self.file_path = file_path
        self.reason = reason


class StorageDeleteError(StorageException):
    """File deletion failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {file_path}",
            "STORAGE_DELETE_ERROR",
        )
        self.file_path = file_path
        self.reason = reason


class StoragePermissionError(StorageException):
    """Path escapes the storage root."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"Storage path not allowed: {file_path}",
            "STORAGE_PERMISSION_ERROR",
        )
        self.file_path = file_path
