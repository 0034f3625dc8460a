"""Image inspection with Pillow: detected format and pixel size of uploads."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO

from PIL import Image, UnidentifiedImageError

# Pillow format name -> file extension used for stored avatars
ALLOWED_FORMATS: dict[str, str] = {
    "JPEG": "jpg",
    "PNG": "png",
    "GIF": "gif",
}


@dataclass(frozen=True)
class ImageInfo:
    """Format and dimensions read from an image header."""

    format: str
    width: int
    height: int

    @property
    def extension(self) -> str:
        return ALLOWED_FORMATS[self.format]


def inspect_image(data: bytes) -> ImageInfo | None:
    """Return ImageInfo for a JPEG/PNG/GIF payload, or None if it is not one.

    Only the header is parsed (Image.open is lazy), so oversized pixel
    dimensions are detected without decoding the bitmap.
    """
    try:
        with Image.open(BytesIO(data)) as img:
            fmt = img.format
            width, height = img.size
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError):
        return None
    if fmt not in ALLOWED_FORMATS:
        return None
    return ImageInfo(format=fmt, width=width, height=height)
