"""
File Configuration Provider - Load configuration from YAML/TOML files.

Supported files (first match wins during auto-discovery):
- .treesync.yaml / .treesync.yml
- .treesync.toml
- pyproject.toml ([tool.treesync] section)

Example .treesync.yaml:

    root: ~/code/project
    engine:
      quiet_period_ms: 300
      ignore_globs:
        - "build/**"
        - "*.log"
      git_binary: git
      git_timeout: 30
    logging:
      level: INFO
      format: text
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml


try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for older Python

from treesync.core.exceptions import ConfigFileError, ConfigValidationError
from treesync.core.ports.config_provider import AppConfig, ConfigProviderPort, EngineConfig


logger = logging.getLogger("FileConfigProvider")

CONFIG_FILE_NAMES = (
    ".treesync.yaml",
    ".treesync.yml",
    ".treesync.toml",
    "pyproject.toml",
)

# Flat CLI/env keys -> dotted file keys
KEY_ALIASES = {
    "root": "root",
    "root_path": "root",
    "quiet_period_ms": "engine.quiet_period_ms",
    "ignore_globs": "engine.ignore_globs",
    "git_binary": "engine.git_binary",
    "git_timeout": "engine.git_timeout",
    "watch_debounce_ms": "engine.watch_debounce_ms",
    "force_polling": "engine.force_polling",
    "log_level": "logging.level",
    "log_format": "logging.format",
    "log_file": "logging.file",
}

_TRUE_STRINGS = ("1", "true", "yes", "on")
_FALSE_STRINGS = ("0", "false", "no", "off", "")


def get_nested(data: dict[str, Any], key: str, default: Any = None) -> Any:
    """Look up a dotted key in nested dicts."""
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def set_nested(data: dict[str, Any], key: str, value: Any) -> None:
    """Set a dotted key, creating intermediate dicts."""
    parts = key.split(".")
    current = data
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value


def apply_overrides(data: dict[str, Any], overrides: dict[str, Any] | None) -> None:
    """
    Merge flat overrides (e.g. ``vars(args)``) into nested config data.

    Keys that are not known aliases and contain no dot are ignored, as are
    None values, so argparse namespaces can be passed through unfiltered.
    """
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key in KEY_ALIASES:
            set_nested(data, KEY_ALIASES[key], value)
        elif "." in key:
            set_nested(data, key, value)


def _to_int(value: Any, key: str, errors: list[str]) -> int | None:
    if isinstance(value, bool):
        errors.append(f"{key} must be an integer, got {value!r}")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        errors.append(f"{key} must be an integer, got {value!r}")
        return None


def _to_float(value: Any, key: str, errors: list[str]) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        errors.append(f"{key} must be a number, got {value!r}")
        return None


def _to_bool(value: Any, key: str, errors: list[str]) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    errors.append(f"{key} must be a boolean, got {value!r}")
    return None


def _to_globs(value: Any, key: str, errors: list[str]) -> list[str] | None:
    if isinstance(value, str):
        return [p.strip() for p in value.split(",") if p.strip()]
    if isinstance(value, (list, tuple)):
        return [str(p) for p in value]
    errors.append(f"{key} must be a list of glob patterns, got {value!r}")
    return None


def build_app_config(data: dict[str, Any]) -> AppConfig:
    """
    Build an AppConfig from nested config data.

    Args:
        data: Nested dict with ``root``, ``engine`` and ``logging`` sections

    Returns:
        AppConfig with defaults for anything missing

    Raises:
        ConfigValidationError: If a value has the wrong type
    """
    errors: list[str] = []
    engine = EngineConfig()

    value = get_nested(data, "engine.quiet_period_ms")
    if value is not None:
        engine.quiet_period_ms = _to_int(value, "engine.quiet_period_ms", errors) or 0

    value = get_nested(data, "engine.ignore_globs")
    if value is not None:
        engine.ignore_globs = _to_globs(value, "engine.ignore_globs", errors) or []

    value = get_nested(data, "engine.git_binary")
    if value is not None:
        engine.git_binary = str(value)

    value = get_nested(data, "engine.git_timeout")
    if value is not None:
        engine.git_timeout = _to_float(value, "engine.git_timeout", errors)

    value = get_nested(data, "engine.watch_debounce_ms")
    if value is not None:
        engine.watch_debounce_ms = _to_int(value, "engine.watch_debounce_ms", errors) or 0

    value = get_nested(data, "engine.force_polling")
    if value is not None:
        engine.force_polling = bool(_to_bool(value, "engine.force_polling", errors))

    if errors:
        raise ConfigValidationError("Invalid configuration values", errors=errors)

    root = get_nested(data, "root")
    log_file = get_nested(data, "logging.file")

    return AppConfig(
        engine=engine,
        root_path=str(Path(str(root)).expanduser()) if root else None,
        log_level=str(get_nested(data, "logging.level", "INFO")).upper(),
        log_format=str(get_nested(data, "logging.format", "text")).lower(),
        log_file=str(log_file) if log_file else None,
    )


def read_config_file(path: Path) -> dict[str, Any]:
    """
    Read one config file into a nested dict.

    Raises:
        ConfigFileError: If the file cannot be read or parsed
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(f"Cannot read config file {path}: {e}", file_path=str(path)) from e

    if path.suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigFileError(
                f"Invalid YAML syntax in {path}: {e}", file_path=str(path), cause=e
            ) from e
    elif path.suffix == ".toml":
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            raise ConfigFileError(
                f"Invalid TOML syntax in {path}: {e}", file_path=str(path), cause=e
            ) from e
        if path.name == "pyproject.toml":
            data = data.get("tool", {}).get("treesync", {})
    else:
        raise ConfigFileError(f"Unsupported config file type: {path}", file_path=str(path))

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(
            f"Config file {path} must contain a mapping at the top level", file_path=str(path)
        )
    return data


def find_config_file(search_dir: Path | None = None) -> Path | None:
    """
    Find the first config file in a directory.

    pyproject.toml only counts when it has a [tool.treesync] section.
    """
    directory = Path(search_dir) if search_dir else Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = directory / name
        if not candidate.is_file():
            continue
        if name == "pyproject.toml":
            try:
                if not read_config_file(candidate):
                    continue
            except ConfigFileError:
                continue
        return candidate
    return None


class FileConfigProvider(ConfigProviderPort):
    """
    Configuration provider that loads from YAML or TOML files.

    Precedence: CLI overrides > config file > defaults.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        cli_overrides: dict[str, Any] | None = None,
        search_dir: Path | None = None,
    ):
        """
        Initialize the file config provider.

        Args:
            config_path: Explicit config file. Auto-discovered when None.
            cli_overrides: Flat overrides from command line arguments
            search_dir: Directory searched during auto-discovery (default: cwd)
        """
        self._explicit_path = Path(config_path) if config_path else None
        self._cli_overrides = dict(cli_overrides or {})
        self._search_dir = search_dir
        self._config_file_path: Path | None = None
        self._data: dict[str, Any] | None = None
        self._overrides: dict[str, Any] = {}

    @property
    def name(self) -> str:
        if self._config_file_path:
            return f"FileConfig({self._config_file_path.name})"
        return "FileConfig"

    @property
    def config_file_path(self) -> Path | None:
        """Config file in use, resolved on first access."""
        if self._config_file_path is None:
            self._config_file_path = self._resolve_path()
        return self._config_file_path

    def _resolve_path(self) -> Path | None:
        if self._explicit_path is not None:
            if not self._explicit_path.exists():
                raise ConfigFileError(
                    f"Config file not found: {self._explicit_path}",
                    file_path=str(self._explicit_path),
                )
            return self._explicit_path
        return find_config_file(self._search_dir)

    def raw_data(self) -> dict[str, Any]:
        """Nested config data with CLI overrides applied."""
        if self._data is None:
            path = self.config_file_path
            data = read_config_file(path) if path else {}
            if path:
                logger.debug(f"Loaded config from {path}")
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
            return list(e.errors)
        except ConfigFileError as e:
            return [e.message]
        return config.validate()
