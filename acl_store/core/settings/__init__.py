"""Pydantic Settings v2 configuration.

Import settings via cached loaders:
    from acl_store.core.settings import get_acl_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. YAML/conf.d files (optional, local/dev)
    3. Environment variables
    4. .env file
    5. secrets_dir
"""

from __future__ import annotations

from .acl import AclSettings
from .loader import clear_all_caches, get_acl_settings, get_logging_settings
from .logs import LoggingSettings

__all__ = [
    "AclSettings",
    "LoggingSettings",
    "clear_all_caches",
    "get_acl_settings",
    "get_logging_settings",
]
