"""
Exception hierarchy for treesync.

All errors raised or returned by the engine derive from TreeSyncError.
Each carries a stable ``code`` so transports can render a message without
matching on class names.

Hierarchy:
    TreeSyncError
    ├── LifecycleError
    │   ├── NotInitializedError
    │   └── EngineDisposedError
    ├── NotARepositoryError
    ├── GitCommandError
    ├── WatcherError
    └── ConfigError
        ├── ConfigFileError
        └── ConfigValidationError
"""

from __future__ import annotations

from typing import Any


__all__ = [
    "ConfigError",
    "ConfigFileError",
    "ConfigValidationError",
    "EngineDisposedError",
    "GitCommandError",
    "LifecycleError",
    "NotARepositoryError",
    "NotInitializedError",
    "TreeSyncError",
    "WatcherError",
]


class TreeSyncError(Exception):
    """
    Base exception for all treesync errors.

    Attributes:
        message: Human-readable error message.
        cause: The underlying exception, if any.
    """

    code = "TREESYNC_ERROR"

    def __init__(self, message: str, *, cause: BaseException | None = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} (caused by: {self.cause})"
        return self.message

    def to_envelope(self, root: str | None = None) -> dict[str, Any]:
        """
        Build the error envelope broadcast to status subscribers.

        Args:
            root: Root path the error relates to, if known.

        Returns:
            Dictionary with ``code``, ``message`` and ``root`` keys.
        """
        return {"code": self.code, "message": str(self), "root": root}


# =============================================================================
# Lifecycle Errors
# =============================================================================


class LifecycleError(TreeSyncError):
    """Operation attempted in a lifecycle state that does not allow it."""

    code = "LIFECYCLE_ERROR"


class NotInitializedError(LifecycleError):
    """Operation attempted before any successful initialize()."""

    code = "NOT_INITIALIZED"

    def __init__(self, message: str = "Engine is not bound to a repository", **kwargs: Any):
        super().__init__(message, **kwargs)


class EngineDisposedError(LifecycleError):
    """Operation attempted after the engine was disposed."""

    code = "DISPOSED"

    def __init__(self, message: str = "Engine has been disposed", **kwargs: Any):
        super().__init__(message, **kwargs)


# =============================================================================
# Repository / Git Errors
# =============================================================================


class NotARepositoryError(TreeSyncError):
    """The target directory failed the repository check."""

    code = "NOT_A_REPOSITORY"

    def __init__(self, message: str, *, path: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.path = path


class GitCommandError(TreeSyncError):
    """
    A git invocation failed.

    Attributes:
        command: The git arguments that were run (without the binary).
        exit_code: Process exit status, or None when git never ran.
        stderr: Captured standard error output.
    """

    code = "GIT_COMMAND_ERROR"

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        exit_code: int | None = None,
        stderr: str = "",
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.command = list(command or [])
        self.exit_code = exit_code
        self.stderr = stderr

    def to_envelope(self, root: str | None = None) -> dict[str, Any]:
        envelope = super().to_envelope(root)
        envelope["exit_code"] = self.exit_code
        return envelope


class WatcherError(TreeSyncError):
    """The filesystem watcher failed to bind (missing root, permission denied)."""

    code = "WATCHER_ERROR"

    def __init__(self, message: str, *, path: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.path = path


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(TreeSyncError):
    """Base class for configuration problems."""

    code = "CONFIG_ERROR"


class ConfigFileError(ConfigError):
    """A configuration file could not be read or parsed."""

    code = "CONFIG_FILE_ERROR"

    def __init__(self, message: str, *, file_path: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.file_path = file_path


class ConfigValidationError(ConfigError):
    """Loaded configuration values are invalid."""

    code = "CONFIG_VALIDATION_ERROR"

    def __init__(self, message: str, *, errors: list[str] | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.errors = list(errors or [])
