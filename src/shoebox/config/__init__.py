"""Configuration management for Shoebox.

Settings live in `~/.shoebox/config.yaml`. Values are layered as defaults,
then the file, then `SHOEBOX__SECTION__KEY` environment variables, then
options given on the command line.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import ShoeboxConfig
from .resolver import env_overrides_from, expand_dotted, merge_overrides, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.shoebox/config.yaml")
CONFIG_HEADER = (
    "# Shoebox configuration file\n"
    "# Manage with `shoebox config set KEY --value VALUE` or edit by hand.\n"
)


class ConfigManager:
    """Read, layer, and update the user configuration file."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            config_path: Configuration file; defaults to `~/.shoebox/config.yaml`.
            env: Environment to read overrides from; defaults to `os.environ`.
        """
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = os.environ if env is None else env

    @property
    def config_path(self) -> Path:
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
    ) -> ShoeboxConfig:
        """Return the effective configuration. The file is never created here.

        Args:
            cli_overrides: Dotted-key values from command-line options.
            include_env: Apply `SHOEBOX__*` environment variables.

        Raises:
            ConfigError: If the file cannot be parsed or a value is invalid.
        """
        return resolve_with_precedence(
            defaults=ShoeboxConfig(),
            file_overrides=self.load_file_overrides(),
            env_overrides=env_overrides_from(self._env) if include_env else None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored in the configuration file, if any."""
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Failed to read configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def assign(self, key: str, value: Any) -> ShoeboxConfig:
        """Store `value` under the dotted `key` after validating the result.

        Args:
            key: Dotted path such as `layout.incoming_dirname`.
            value: Already-parsed value to store.

        Returns:
            ShoeboxConfig: Configuration described by the updated file.

        Raises:
            ConfigError: If the key is not dotted or the new value is invalid.
                Nothing is written in that case.
        """
        segments = [segment.strip() for segment in key.split(".") if segment.strip()]
        if len(segments) < 2:
            raise ConfigError("KEY must be a dotted path such as 'logging.level'.")

        update = expand_dotted({".".join(segments): value}, source_name="cli")
        data = merge_overrides(self.load_file_overrides(), update)
        config = resolve_with_precedence(defaults=ShoeboxConfig(), file_overrides=data)
        self.save(data)
        return config

    def save(self, data: ShoeboxConfig | Mapping[str, Any]) -> None:
        """Write `data` to the configuration file with a timestamped header."""
        if isinstance(data, ShoeboxConfig):
            data = data.model_dump(mode="python")
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().astimezone().isoformat(timespec="seconds")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self._config_path.write_text(
            f"{CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )

    def read_text(self) -> str:
        """Return the configuration file contents, or "" when it does not exist."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")


__all__ = [
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ShoeboxConfig",
    "resolve_with_precedence",
]
