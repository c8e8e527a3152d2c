"""Core: config, exception handlers and application bootstrap."""

from visita.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
