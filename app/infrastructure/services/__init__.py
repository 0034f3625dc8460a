"""Infrastructure services: helpers backed by third-party libraries."""

from app.infrastructure.services.image_inspector import (
    ALLOWED_FORMATS,
    ImageInfo,
    inspect_image,
)

__all__ = ["ALLOWED_FORMATS", "ImageInfo", "inspect_image"]
