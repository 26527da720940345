"""
Dependency utilities for sharing configuration across the client factories.
"""

from functools import lru_cache

from syndicaster.core.config import SyndicasterSettings, get_settings


@lru_cache()
def _settings_singleton() -> SyndicasterSettings:
    """Ensure configuration is created once per process."""
    return get_settings()


def get_app_settings() -> SyndicasterSettings:
    """Return the process-wide settings."""
    return _settings_singleton()


__all__ = ["get_app_settings"]
