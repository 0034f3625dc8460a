"""Shared utilities: datetime and generators."""

from app.shared.utils.datetime import ensure_utc, isoformat_utc, utc_now
from app.shared.utils.generators import generate_cuid, generate_otp

__all__ = [
    "ensure_utc",
    "generate_cuid",
    "generate_otp",
    "isoformat_utc",
    "utc_now",
]
