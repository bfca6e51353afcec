"""Logging infrastructure.

Basic usage:
    from acl_store.infra.logging import setup_logging

    setup_logging()  # reads LOG_* settings once
"""

from acl_store.infra.logging.config import configure_logging, setup_logging, shutdown
from acl_store.infra.logging.formatters import JSONFormatter

__all__ = [
    "JSONFormatter",
    "configure_logging",
    "setup_logging",
    "shutdown",
]
