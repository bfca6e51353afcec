"""Process-wide settings accessors.

Each accessor builds its settings object on first use and returns the
same frozen instance afterwards. Stores read ACL defaults through
``get_acl_settings()`` at construction time, so a test that changes the
environment must call ``clear_all_caches()`` before building new stores.
"""

from __future__ import annotations

from functools import lru_cache

from .acl import AclSettings
from .logs import LoggingSettings


@lru_cache(maxsize=1)
def get_acl_settings() -> AclSettings:
    """Return the cached AclSettings."""
    return AclSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Return the cached LoggingSettings."""
    return LoggingSettings()


def clear_all_caches() -> None:
    """Drop every cached settings object so the next access reloads it."""
    get_acl_settings.cache_clear()
    get_logging_settings.cache_clear()
