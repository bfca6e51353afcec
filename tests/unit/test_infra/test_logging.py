"""Unit tests for logging configuration and the JSON formatter."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Generator
from logging.handlers import QueueHandler
from pathlib import Path

import pytest
from opentelemetry import trace
from opentelemetry.trace import NonRecordingSpan, SpanContext, TraceFlags

from acl_store.core.settings.logs import LoggingSettings
from acl_store.infra.logging import JSONFormatter, configure_logging, setup_logging, shutdown
from acl_store.infra.logging import config as log_config


def _record(msg: str = "hello", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="acl_store.core.acl.store",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=None,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger() -> Generator[logging.Logger, None, None]:
    """Undo root logger changes made by configure_logging."""
    root = logging.getLogger()
    level = root.level
    yield root
    shutdown()
    root.setLevel(level)


@pytest.mark.unit
class TestJSONFormatter:
    """Test suite for JSONFormatter."""

    def test_default_keys(self):
        """Test level, logger, message and timestamp are emitted."""
        payload = json.loads(JSONFormatter().format(_record()))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "acl_store.core.acl.store"
        assert payload["message"] == "hello"
        assert payload["timestamp"].endswith("Z")

    def test_static_and_extra_fields(self):
        """Test static fields and record extras become top-level keys."""
        formatter = JSONFormatter(static={"service": "acl-store"})
        payload = json.loads(formatter.format(_record(acl_uuid="abc", scope="alice")))

        assert payload["service"] == "acl-store"
        assert payload["acl_uuid"] == "abc"
        assert payload["scope"] == "alice"
        assert "pathname" not in payload

    def test_non_serializable_extra_uses_str(self):
        """Test extras that json cannot encode fall back to str()."""
        payload = json.loads(JSONFormatter().format(_record(path=Path("/tmp/x"))))
        assert payload["path"] == "/tmp/x"

    def test_exception_is_single_line(self):
        """Test exception text stays on one JSONL line."""
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()

        line = JSONFormatter().format(record)
        assert "\n" not in line
        assert "ValueError: boom" in json.loads(line)["exception"]

    def test_no_trace_ids_without_span(self):
        """Test trace fields are omitted outside a span."""
        payload = json.loads(JSONFormatter().format(_record()))
        assert "trace_id" not in payload

    def test_trace_ids_from_active_span(self):
        """Test trace and span ids are copied from the current span."""
        ctx = SpanContext(
            trace_id=0x1234,
            span_id=0x5678,
            is_remote=False,
            trace_flags=TraceFlags(TraceFlags.SAMPLED),
        )
        with trace.use_span(NonRecordingSpan(ctx)):
            payload = json.loads(JSONFormatter().format(_record()))

        assert payload["trace_id"] == format(0x1234, "032x")
        assert payload["span_id"] == format(0x5678, "016x")


@pytest.mark.unit
class TestConfigureLogging:
    """Test suite for configure_logging and setup_logging."""

    def test_file_handler_writes_jsonl(self, restore_root_logger, tmp_path: Path):
        """Test records reach the rotating file through the queue."""
        log_file = tmp_path / "logs" / "acl.log.jsonl"
        configure_logging(
            log_level="DEBUG",
            file_path=log_file,
            console_enabled=False,
            capture_warnings=False,
            service_name="acl-test",
        )

        logging.getLogger("acl_store.core.acl.store").info(
            "Registered ACL scope", extra={"scope": "alice"}
        )
        shutdown()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        payload = json.loads(lines[-1])
        assert payload["message"] == "Registered ACL scope"
        assert payload["scope"] == "alice"
        assert payload["service"] == "acl-test"

    def test_text_format(self, restore_root_logger, tmp_path: Path):
        """Test plain-text output when JSON is disabled."""
        log_file = tmp_path / "acl.log"
        configure_logging(
            file_path=log_file,
            json_logs=False,
            console_enabled=False,
            capture_warnings=False,
        )

        logging.getLogger("acl_store").warning("plain text")
        shutdown()

        content = log_file.read_text(encoding="utf-8")
        assert "WARNING - acl_store - plain text" in content

    def test_root_level_applied(self, restore_root_logger):
        """Test the root logger level follows log_level."""
        configure_logging(log_level="error", console_enabled=False, capture_warnings=False)
        assert restore_root_logger.level == logging.ERROR

    def test_setup_logging_runs_once(self, restore_root_logger):
        """Test repeated setup_logging calls install one queue handler."""
        settings = LoggingSettings(console_enabled=False, capture_warnings=False)

        setup_logging(settings)
        setup_logging(settings)

        queue_handlers = [h for h in restore_root_logger.handlers if isinstance(h, QueueHandler)]
        assert len(queue_handlers) == 1

    def test_setup_logging_force_reconfigures(self, restore_root_logger):
        """Test force=True replaces the existing configuration."""
        setup_logging(LoggingSettings(console_enabled=False, capture_warnings=False))
        setup_logging(
            LoggingSettings(level="WARNING", console_enabled=False, capture_warnings=False),
            force=True,
        )

        queue_handlers = [h for h in restore_root_logger.handlers if isinstance(h, QueueHandler)]
        assert len(queue_handlers) == 1
        assert restore_root_logger.level == logging.WARNING

    def test_configure_logging_replaces_previous_setup(self, restore_root_logger, tmp_path: Path):
        """Test a second configure_logging call stops the first listener."""
        configure_logging(
            file_path=tmp_path / "first.log", console_enabled=False, capture_warnings=False
        )
        first_listener = log_config._listener

        configure_logging(
            file_path=tmp_path / "second.log", console_enabled=False, capture_warnings=False
        )

        queue_handlers = [h for h in restore_root_logger.handlers if isinstance(h, QueueHandler)]
        assert len(queue_handlers) == 1
        assert first_listener is not None
        assert first_listener._thread is None
        assert log_config._listener is not first_listener

    def test_shutdown_is_idempotent(self):
        """Test shutdown can be called without prior configuration."""
        shutdown()
        shutdown()
