"""
Domain Entities - immutable snapshots of working-tree state.

A new WorkingTreeStatus is produced on every successful refresh and fully
replaces the previous one for subscribers. Nothing here is mutated after
construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .enums import FileEventKind


@dataclass(frozen=True)
class FileStatusEntry:
    """
    Status of a single path as reported by porcelain status.

    The two status codes are the raw porcelain columns (``X`` for the index,
    ``Y`` for the working tree), e.g. ``"M"``, ``"A"``, ``"?"`` or ``" "``.
    """

    path: str
    index_status_code: str
    working_dir_status_code: str
    renamed_from: str | None = None

    @property
    def is_untracked(self) -> bool:
        return self.index_status_code == "?" and self.working_dir_status_code == "?"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {
            "path": self.path,
            "index": self.index_status_code,
            "workingDir": self.working_dir_status_code,
        }
        if self.renamed_from is not None:
            data["from"] = self.renamed_from
        return data


@dataclass(frozen=True)
class WorkingTreeStatus:
    """
    Canonical status of a working tree.

    ``is_clean`` holds iff all six path categories are empty; the mapper
    computes it, and ``__post_init__`` refuses an inconsistent value.
    """

    current_branch: str = ""
    tracking_branch: str = ""
    ahead: int = 0
    behind: int = 0
    staged: tuple[str, ...] = ()
    not_added: tuple[str, ...] = ()
    created: tuple[str, ...] = ()
    modified: tuple[str, ...] = ()
    deleted: tuple[str, ...] = ()
    conflicted: tuple[str, ...] = ()
    files: tuple[FileStatusEntry, ...] = ()
    is_clean: bool = True
    detached: bool = False

    def __post_init__(self) -> None:
        expected = not any(self.categories().values())
        if self.is_clean != expected:
            raise ValueError(
                f"is_clean={self.is_clean} contradicts path categories (expected {expected})"
            )

    def categories(self) -> dict[str, tuple[str, ...]]:
        """The six path categories keyed by name."""
        return {
            "staged": self.staged,
            "not_added": self.not_added,
            "created": self.created,
            "modified": self.modified,
            "deleted": self.deleted,
            "conflicted": self.conflicted,
        }

    @property
    def has_changes(self) -> bool:
        return not self.is_clean

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation used by transports."""
        return {
            "currentBranch": self.current_branch,
            "trackingBranch": self.tracking_branch,
            "ahead": self.ahead,
            "behind": self.behind,
            "staged": list(self.staged),
            "notAdded": list(self.not_added),
            "created": list(self.created),
            "modified": list(self.modified),
            "deleted": list(self.deleted),
            "conflicted": list(self.conflicted),
            "files": [f.to_dict() for f in self.files],
            "isClean": self.is_clean,
            "detached": self.detached,
        }


@dataclass(frozen=True)
class CommitRecord:
    """A single commit from the log. Read-only projection, never cached."""

    hash: str
    date: str
    message: str
    refs: str = ""
    author_name: str = ""
    author_email: str = ""

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "hash": self.hash,
            "date": self.date,
            "message": self.message,
            "refs": self.refs,
            "authorName": self.author_name,
            "authorEmail": self.author_email,
        }


@dataclass(frozen=True)
class FileEvent:
    """A filesystem event emitted by a watcher."""

    kind: FileEventKind
    path: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.path}"


@dataclass
class EngineStats:
    """
    Running counters for a SyncEngine.

    Mirrors what a status bar or a ``watch`` command wants to show: how many
    filesystem events arrived, how many refreshes ran and how they ended.
    """

    started_at: datetime = field(default_factory=datetime.now)
    events_received: int = 0
    refreshes_triggered: int = 0
    refreshes_succeeded: int = 0
    refreshes_failed: int = 0
    mutations_run: int = 0
    errors: list[str] = field(default_factory=list)

    max_errors: int = 20

    def record_error(self, message: str) -> None:
        """Remember an error message, keeping only the most recent ones."""
        self.errors.append(message)
        if len(self.errors) > self.max_errors:
            del self.errors[: len(self.errors) - self.max_errors]

    @property
    def uptime_seconds(self) -> float:
        return (datetime.now() - self.started_at).total_seconds()

    @property
    def uptime_formatted(self) -> str:
        """Uptime as ``1h 2m 3s``, dropping leading zero units."""
        total = int(self.uptime_seconds)
        hours, remainder = divmod(total, 3600)
        minutes, seconds = divmod(remainder, 60)
        if hours:
            return f"{hours}h {minutes}m {seconds}s"
        if minutes:
            return f"{minutes}m {seconds}s"
        return f"{seconds}s"

    def to_dict(self) -> dict[str, Any]:
        return {
            "events_received": self.events_received,
            "refreshes_triggered": self.refreshes_triggered,
            "refreshes_succeeded": self.refreshes_succeeded,
            "refreshes_failed": self.refreshes_failed,
            "mutations_run": self.mutations_run,
            "errors": list(self.errors),
            "uptime": self.uptime_formatted,
        }
