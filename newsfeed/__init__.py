"""News feed dashboard client package."""

from .settings import Settings, get_settings, reset_settings_cache  # noqa: F401

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
