"""Settings consumed by ``acl_store.infra.logging.setup_logging``."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_logging_yaml_source

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Where and how host processes emit ACL store logs.

    Environment variables use LOG_ prefix.
    Example: LOG_LEVEL=DEBUG, LOG_JSON_LOGS=false, LOG_FILE_PATH=logs/acl.log.jsonl
    """

    service_name: str = Field(
        default="acl-store",
        description="Value of the static 'service' key on JSON records",
    )
    level: LogLevel = Field(
        default="INFO",
        description="Root logger level",
    )
    json_logs: bool = Field(
        default=True,
        description="Emit one JSON object per line instead of plain text",
    )

    # Handlers
    console_enabled: bool = Field(
        default=True,
        description="Attach a stderr handler",
    )
    file_path: Path | None = Field(
        default=None,
        description="Rotating log file; unset disables file output",
    )
    file_max_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1024,
        description="Rotate the log file once it reaches this size",
    )
    file_backup_count: int = Field(
        default=5,
        ge=0,
        le=100,
        description="Rotated files kept alongside the active one",
    )
    capture_warnings: bool = Field(
        default=True,
        description="Route warnings.warn() output through logging",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``configure_logging``."""
        return {
            "service_name": self.service_name,
            "log_level": self.level,
            "json_logs": self.json_logs,
            "console_enabled": self.console_enabled,
            "file_path": str(self.file_path) if self.file_path else None,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
            "capture_warnings": self.capture_warnings,
        }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Priority: init kwargs, YAML files, environment, .env, secrets."""
        return (
            init_settings,
            create_logging_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
