"""
Exit Codes - Process exit statuses for the treesync CLI.
"""

from enum import IntEnum

from treesync.core.exceptions import (
    ConfigError,
    GitCommandError,
    NotARepositoryError,
)


class ExitCode(IntEnum):
    """Exit codes returned by ``treesync``."""

    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    NOT_A_REPOSITORY = 3
    GIT_ERROR = 4
    INTERRUPTED = 130  # 128 + SIGINT

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ExitCode":
        """Map an exception to the matching exit code."""
        if isinstance(exc, KeyboardInterrupt):
            return cls.INTERRUPTED
        if isinstance(exc, ConfigError):
            return cls.CONFIG_ERROR
        if isinstance(exc, NotARepositoryError):
            return cls.NOT_A_REPOSITORY
        if isinstance(exc, GitCommandError):
            return cls.GIT_ERROR
        return cls.ERROR
