"""
Environment Configuration Provider - Load configuration from environment.

Precedence (highest first):
1. CLI overrides
2. TREESYNC_* environment variables
3. .env file in the working directory
4. Config file (.treesync.yaml, .treesync.toml, pyproject.toml)
5. Defaults
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from treesync.core.exceptions import ConfigFileError, ConfigValidationError
from treesync.core.ports.config_provider import AppConfig, ConfigProviderPort

from .file_config import (
    KEY_ALIASES,
    FileConfigProvider,
    apply_overrides,
    build_app_config,
    get_nested,
    set_nested,
)


logger = logging.getLogger("EnvironmentConfigProvider")

ENV_PREFIX = "TREESYNC_"

# Environment variable -> dotted config key
ENV_KEYS = {
    "TREESYNC_ROOT": "root",
    "TREESYNC_QUIET_PERIOD_MS": "engine.quiet_period_ms",
    "TREESYNC_IGNORE_GLOBS": "engine.ignore_globs",
    "TREESYNC_GIT_BINARY": "engine.git_binary",
    "TREESYNC_GIT_TIMEOUT": "engine.git_timeout",
    "TREESYNC_WATCH_DEBOUNCE_MS": "engine.watch_debounce_ms",
    "TREESYNC_FORCE_POLLING": "engine.force_polling",
    "TREESYNC_LOG_LEVEL": "logging.level",
    "TREESYNC_LOG_FORMAT": "logging.format",
    "TREESYNC_LOG_FILE": "logging.file",
}


class EnvironmentConfigProvider(ConfigProviderPort):
    """
    Configuration provider that layers the environment over a config file.
    """

    def __init__(
        self,
        config_file: Path | None = None,
        cli_overrides: dict[str, Any] | None = None,
        env_file: Path | None = None,
    ):
        """
        Initialize the provider.

        Args:
            config_file: Explicit config file (auto-discovered when None)
            cli_overrides: Flat overrides from command line arguments
            env_file: .env file to read (default: ./.env if present)
        """
        self._file_provider = FileConfigProvider(config_path=config_file)
        self._cli_overrides = dict(cli_overrides or {})
        self._env_file = Path(env_file) if env_file else Path.cwd() / ".env"
        self._overrides: dict[str, Any] = {}
        self._data: dict[str, Any] | None = None

    @property
    def name(self) -> str:
        try:
            path = self._file_provider.config_file_path
        except ConfigFileError:
            path = None
        if path:
            return f"Environment+{path.name}"
        return "Environment"

    def _env_values(self) -> dict[str, str]:
        values: dict[str, str] = {}
        if self._env_file.is_file():
            for key, value in dotenv_values(self._env_file).items():
                if key.startswith(ENV_PREFIX) and value is not None:
                    values[key] = value
            logger.debug(f"Loaded .env from {self._env_file}")
        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                values[key] = value
        return values

    def raw_data(self) -> dict[str, Any]:
        """Nested config data with every layer applied."""
        if self._data is None:
            data = copy.deepcopy(self._file_provider.raw_data())
            for env_key, value in self._env_values().items():
                if env_key in ENV_KEYS:
                    set_nested(data, ENV_KEYS[env_key], value)
                else:
                    logger.debug(f"Ignoring unknown environment variable {env_key}")
            apply_overrides(data, self._cli_overrides)
            self._data = data
        return self._data

    def load(self) -> AppConfig:
        data = self.raw_data()
        for key, value in self._overrides.items():
            set_nested(data, key, value)
        return build_app_config(data)

    def get(self, key: str, default: Any = None) -> Any:
        key = KEY_ALIASES.get(key, key)
        if key in self._overrides:
            return self._overrides[key]
        return get_nested(self.raw_data(), key, default)

    def set(self, key: str, value: Any) -> None:
        self._overrides[KEY_ALIASES.get(key, key)] = value

    def validate(self) -> list[str]:
        try:
            config = self.load()
        except ConfigValidationError as e:
            return [
                f"{err} (set it in the config file or via the matching TREESYNC_* environment variable)"
                for err in e.errors
            ]
        except ConfigFileError as e:
            return [e.message]
        return config.validate()
