"""Concierge configuration.

    from concierge.config import get_settings

    settings = get_settings()
    policy = settings.conversation.policy
"""

from functools import lru_cache

from concierge.config.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    return Settings()


def reload_settings() -> Settings:
    """Drop the cached settings and load them again."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
