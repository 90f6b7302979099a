"""
Configuration Provider Port - Abstract interface for configuration.

Implementations:
- EnvironmentConfigProvider: Load from TREESYNC_* env vars, a config file and CLI overrides
- FileConfigProvider: Load from YAML/TOML config files or pyproject.toml
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from .file_watcher import DEFAULT_IGNORE_GLOBS


LOG_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class EngineConfig:
    """Configuration for a SyncEngine."""

    quiet_period_ms: int = 300  # Debounce window after the last fs event

    # Extra root-relative globs ignored on top of DEFAULT_IGNORE_GLOBS
    ignore_globs: list[str] = field(default_factory=list)

    # Git
    git_binary: str = "git"
    git_timeout: float | None = None  # Seconds; None = wait forever

    # Watcher
    watch_debounce_ms: int = 50  # Batching inside the watch library itself
    force_polling: bool = False

    @property
    def quiet_period_seconds(self) -> float:
        return self.quiet_period_ms / 1000.0

    @property
    def all_ignore_globs(self) -> list[str]:
        """Default ignores followed by the configured extras, without duplicates."""
        globs = list(DEFAULT_IGNORE_GLOBS)
        for pattern in self.ignore_globs:
            if pattern not in globs:
                globs.append(pattern)
        return globs

    def validate(self) -> list[str]:
        """
        Validate engine settings.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.quiet_period_ms < 0:
            errors.append("quiet_period_ms must be >= 0")
        if self.watch_debounce_ms < 0:
            errors.append("watch_debounce_ms must be >= 0")
        if self.git_timeout is not None and self.git_timeout <= 0:
            errors.append("git_timeout must be positive when set")
        if not self.git_binary:
            errors.append("git_binary must not be empty")

        return errors


@dataclass
class AppConfig:
    """Complete application configuration."""

    engine: EngineConfig = field(default_factory=EngineConfig)

    # Paths
    root_path: str | None = None

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"
    log_file: str | None = None

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = list(self.engine.validate())

        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"Invalid log level: {self.log_level}")
        if self.log_format not in LOG_FORMATS:
            errors.append(f"Invalid log format: {self.log_format} (expected text or json)")

        return errors


class ConfigProviderPort(ABC):
    """
    Abstract interface for configuration providers.

    Configuration can come from various sources:
    - Environment variables
    - YAML/TOML config files
    - Command line arguments
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        ...

    @abstractmethod
    def load(self) -> AppConfig:
        """
        Load configuration from source.

        Returns:
            Complete application configuration
        """
        ...

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a specific configuration value.

        Args:
            key: Configuration key (dot notation supported)
            default: Default value if not found

        Returns:
            Configuration value
        """
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value.

        Args:
            key: Configuration key
            value: Value to set
        """
        ...

    @abstractmethod
    def validate(self) -> list[str]:
        """
        Validate loaded configuration.

        Returns:
            List of validation errors
        """
        ...
