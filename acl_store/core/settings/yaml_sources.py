"""YAML settings sources for ACL and logging configuration.

Each settings class reads an optional base file plus a drop-in directory:

    conf/acl.yaml          base values
    conf/acl.d/*.yaml      merged on top, in file-name order (.yaml, .yml and .json alike)

The base directory defaults to ``conf`` relative to the working directory
and can be moved with an environment variable per settings class.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic_settings import YamlConfigSettingsSource

if TYPE_CHECKING:
    from pydantic_settings import BaseSettings

_DROP_IN_PATTERNS = ("*.yaml", "*.yml", "*.json")


def _collect_files(base: Path, main_name: str, drop_in_name: str | None) -> list[Path]:
    found: list[Path] = []

    main = base / main_name
    if main.is_file():
        found.append(main)

    if drop_in_name:
        drop_in = base / drop_in_name
        if drop_in.is_dir():
            # JSON parses as YAML
            drop_ins = [path for pattern in _DROP_IN_PATTERNS for path in drop_in.glob(pattern)]
            found.extend(sorted(drop_ins, key=lambda path: path.name))

    return found


class ConfDYamlConfigSettingsSource(YamlConfigSettingsSource):
    """YAML source that merges a base file with a ``.d`` drop-in directory.

    Missing files are not an error; with nothing on disk the source
    contributes no values and lower-priority sources apply.
    """

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: str,
        confd_dir: str | None,
        config_dir_env: str,
        base_dir: str = "conf",
        yaml_file_encoding: str | None = "utf-8",
    ) -> None:
        """Resolve the file list and hand it to YamlConfigSettingsSource.

        Args:
            settings_cls: Settings class being populated.
            yaml_file: Base file name inside the config directory.
            confd_dir: Drop-in directory name, or None to read only the base file.
            config_dir_env: Environment variable that relocates the config directory.
            base_dir: Config directory used when the variable is unset.
            yaml_file_encoding: Encoding for every file read.
        """
        base = Path(os.getenv(config_dir_env, base_dir))
        self._yaml_files = _collect_files(base, yaml_file, confd_dir)

        super().__init__(
            settings_cls=settings_cls,
            yaml_file=self._yaml_files or None,
            yaml_file_encoding=yaml_file_encoding,
        )

    def __repr__(self) -> str:
        names = ", ".join(str(path) for path in self._yaml_files)
        return f"{type(self).__name__}(yaml_files=[{names}])"


def create_acl_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    """Source for AclSettings: conf/acl.yaml and conf/acl.d/ (ACL_CONFIG_DIR)."""
    return ConfDYamlConfigSettingsSource(
        settings_cls,
        yaml_file="acl.yaml",
        confd_dir="acl.d",
        config_dir_env="ACL_CONFIG_DIR",
    )


def create_logging_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    """Source for LoggingSettings: conf/logging.yaml and conf/logging.d/ (LOGGING_CONFIG_DIR)."""
    return ConfDYamlConfigSettingsSource(
        settings_cls,
        yaml_file="logging.yaml",
        confd_dir="logging.d",
        config_dir_env="LOGGING_CONFIG_DIR",
    )
