"""Core: config, rate limiting, and application bootstrap.

Single place for settings and shared constants.
"""

from app.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
