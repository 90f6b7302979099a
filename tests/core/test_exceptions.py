"""Tests for the treesync exception hierarchy.

It verifies that:
- All exceptions have the correct inheritance
- Exceptions properly chain causes
- Attributes and codes are correctly stored
- Error envelopes carry what subscribers need
"""

import pytest

from treesync.core.exceptions import (
    ConfigError,
    ConfigFileError,
    ConfigValidationError,
    EngineDisposedError,
    GitCommandError,
    LifecycleError,
    NotARepositoryError,
    NotInitializedError,
    TreeSyncError,
    WatcherError,
)


# =============================================================================
# Base Exception Tests
# =============================================================================


class TestTreeSyncError:
    """Tests for the base exception."""

    def test_message(self):
        error = TreeSyncError("Something failed")
        assert error.message == "Something failed"
        assert str(error) == "Something failed"
        assert error.cause is None

    def test_cause_in_str(self):
        cause = OSError("disk full")
        error = TreeSyncError("Write failed", cause=cause)

        assert error.cause is cause
        assert str(error) == "Write failed (caused by: disk full)"

    def test_envelope(self):
        envelope = TreeSyncError("oops").to_envelope("/repo")
        assert envelope == {"code": "TREESYNC_ERROR", "message": "oops", "root": "/repo"}


# =============================================================================
# Hierarchy Tests
# =============================================================================


class TestHierarchy:
    """All errors derive from TreeSyncError with stable codes."""

    @pytest.mark.parametrize(
        ("error", "code", "parent"),
        [
            (NotInitializedError(), "NOT_INITIALIZED", LifecycleError),
            (EngineDisposedError(), "DISPOSED", LifecycleError),
            (NotARepositoryError("no", path="/x"), "NOT_A_REPOSITORY", TreeSyncError),
            (GitCommandError("no"), "GIT_COMMAND_ERROR", TreeSyncError),
            (WatcherError("no", path="/x"), "WATCHER_ERROR", TreeSyncError),
            (ConfigFileError("no", file_path="a.yaml"), "CONFIG_FILE_ERROR", ConfigError),
            (ConfigValidationError("no", errors=["e"]), "CONFIG_VALIDATION_ERROR", ConfigError),
        ],
    )
    def test_codes_and_parents(self, error, code, parent):
        assert error.code == code
        assert isinstance(error, parent)
        assert isinstance(error, TreeSyncError)

    def test_default_messages(self):
        assert "not bound" in NotInitializedError().message
        assert "disposed" in EngineDisposedError().message


class TestGitCommandError:
    """Tests for GitCommandError attributes."""

    def test_attributes(self):
        error = GitCommandError(
            "git add failed",
            command=["add", "--", "a.txt"],
            exit_code=128,
            stderr="fatal: Unable to create index.lock",
        )

        assert error.command == ["add", "--", "a.txt"]
        assert error.exit_code == 128
        assert "index.lock" in error.stderr

    def test_envelope_includes_exit_code(self):
        envelope = GitCommandError("failed", exit_code=1).to_envelope("/repo")

        assert envelope["code"] == "GIT_COMMAND_ERROR"
        assert envelope["exit_code"] == 1
        assert envelope["root"] == "/repo"

    def test_defaults(self):
        error = GitCommandError("failed")
        assert error.command == []
        assert error.exit_code is None
        assert error.stderr == ""


class TestOtherErrors:
    def test_not_a_repository_path(self):
        assert NotARepositoryError("nope", path="/tmp/x").path == "/tmp/x"

    def test_watcher_error_chains_cause(self):
        cause = PermissionError("denied")
        error = WatcherError("cannot watch", path="/repo", cause=cause)
        assert error.cause is cause
        assert "denied" in str(error)

    def test_config_validation_errors_list(self):
        error = ConfigValidationError("invalid", errors=["a", "b"])
        assert error.errors == ["a", "b"]

    def test_catch_by_base(self):
        with pytest.raises(TreeSyncError):
            raise NotARepositoryError("nope")
