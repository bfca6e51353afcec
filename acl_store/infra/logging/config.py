"""Root logger wiring for processes that embed the ACL store.

The root logger gets a single QueueHandler. The real handlers (stderr,
rotating file) run on a QueueListener thread, so a caller holding a store
lock never waits on handler I/O. Output is JSON Lines or plain text.

The ACL store only ever logs through ``logging.getLogger(__name__)``;
nothing here runs on import. Host applications call ``setup_logging()``
once at startup if they want this configuration.
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from acl_store.infra.logging.formatters import JSONFormatter

if TYPE_CHECKING:
    from acl_store.core.settings.logs import LoggingSettings

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None
_LOGGING_INITIALIZED = False

logger = logging.getLogger(__name__)

_TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Configure logging from LoggingSettings, at most once per process.

    Args:
        log_settings: Settings to apply; get_logging_settings() when omitted.
        force: Tear down the current setup and apply again.
        **configure_kwargs: Values that win over the settings object.
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if force:
        shutdown()

    settings_obj = log_settings
    if settings_obj is None:
        from acl_store.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}

    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    capture_warnings: bool = True,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    service_name: str = "acl-store",
    **kwargs: Any,
) -> None:
    """Configure root logging with dictConfig and the QueueHandler pattern.

    Args:
        log_level: Level name for the root logger.
        file_path: Rotating file target, or None for no file.
        json_logs: Use JSONFormatter instead of the plain text format.
        console_enabled: Attach a stderr handler.
        capture_warnings: Route warnings.warn() through logging.
        file_max_bytes: Size that triggers rotation.
        file_backup_count: Rotated files to keep.
        service_name: Static ``service`` field on JSON records.
        **kwargs: Unused settings, logged at DEBUG.
    """
    global _log_queue, _listener, _queue_handler

    # Replace, never stack, a previous configuration
    shutdown()

    if kwargs:
        logger.debug("Ignoring logging options: %s", ", ".join(sorted(kwargs)))

    if capture_warnings:
        logging.captureWarnings(True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {"level": log_level.upper(), "handlers": []},
        }
    )

    handlers = _build_handlers(
        console_enabled=console_enabled,
        file_path=Path(file_path) if file_path else None,
        json_logs=json_logs,
        file_max_bytes=file_max_bytes,
        file_backup_count=file_backup_count,
        service_name=service_name,
    )

    _log_queue = Queue()
    if handlers:
        _listener = QueueListener(_log_queue, *handlers, respect_handler_level=True)
        _listener.start()
        atexit.unregister(shutdown)
        atexit.register(shutdown)

    _queue_handler = QueueHandler(_log_queue)
    logging.getLogger().addHandler(_queue_handler)


def _build_handlers(
    console_enabled: bool,
    file_path: Path | None,
    json_logs: bool,
    file_max_bytes: int,
    file_backup_count: int,
    service_name: str,
) -> list[logging.Handler]:
    """Create the handlers served by the QueueListener."""

    def make_formatter() -> logging.Formatter:
        if json_logs:
            return JSONFormatter(static={"service": service_name})
        return logging.Formatter(fmt=_TEXT_FORMAT, datefmt=_DATE_FORMAT)

    handlers: list[logging.Handler] = []

    if console_enabled:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(make_formatter())
        handlers.append(console_handler)

    if file_path:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=file_max_bytes,
            backupCount=file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(make_formatter())
        handlers.append(file_handler)

    return handlers


def shutdown() -> None:
    """Stop the QueueListener and detach the root QueueHandler.

    Flushes pending records. Registered with atexit by configure_logging(),
    safe to call more than once.
    """
    global _log_queue, _listener, _queue_handler, _LOGGING_INITIALIZED

    if _listener is not None:
        _listener.stop()
        for handler in _listener.handlers:
            handler.close()
        _listener = None

    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
        _queue_handler = None

    _log_queue = None
    _LOGGING_INITIALIZED = False
