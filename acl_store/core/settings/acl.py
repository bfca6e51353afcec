"""ACL store behaviour settings."""

from __future__ import annotations

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_acl_yaml_source


class AclSettings(BaseSettings):
    """Defaults applied to newly created ACL stores.

    Environment variables use ACL_ prefix.
    Example: ACL_STRICT_PARSING=true, ACL_MAX_SCOPE_LENGTH=128
    """

    name: str = Field(
        default="",
        max_length=255,
        description="Label stamped on new stores",
    )
    default_ttl: int = Field(
        default=0,
        ge=0,
        description="TTL in seconds stamped on new stores (informational only)",
    )
    strict_parsing: bool = Field(
        default=False,
        description="Raise accumulated rule errors from AclStore.from_text instead of keeping them",
    )
    max_scope_length: int = Field(
        default=255,
        ge=1,
        le=4096,
        description="Longest accepted scope identifier piece",
    )
    log_parse_errors: bool = Field(
        default=True,
        description="Emit a warning summarising rule-text errors after each parse",
    )

    model_config = SettingsConfigDict(
        env_prefix="ACL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_acl_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
