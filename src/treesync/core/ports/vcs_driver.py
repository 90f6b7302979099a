"""
Version Control Driver Port - Abstract interface for running git.

Implementations:
- GitCliDriver: runs the git binary through asyncio subprocesses

Every method may fail; implementations raise GitCommandError so the engine
can turn the failure into a typed Result.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from treesync.core.exceptions import GitCommandError


__all__ = [
    "GitCommandError",
    "RawFileStatus",
    "RawLog",
    "RawLogEntry",
    "RawStatus",
    "VersionControlDriverPort",
]


@dataclass
class RawFileStatus:
    """One porcelain record: path plus the index/worktree status columns."""

    path: str
    index: str
    working_dir: str
    from_path: str | None = None


@dataclass
class RawStatus:
    """
    Parsed porcelain status as produced by the driver.

    Field names follow the categories git porcelain naturally splits into.
    Lists hold paths relative to the repository root.
    """

    current: str = ""
    tracking: str = ""
    ahead: int = 0
    behind: int = 0
    detached: bool = False
    staged: list[str] = field(default_factory=list)
    not_added: list[str] = field(default_factory=list)
    created: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    conflicted: list[str] = field(default_factory=list)
    renamed: list[tuple[str, str]] = field(default_factory=list)  # (from, to)
    files: list[RawFileStatus] = field(default_factory=list)


@dataclass
class RawLogEntry:
    """One commit as read from ``git log``."""

    hash: str
    date: str
    message: str
    refs: str = ""
    author_name: str = ""
    author_email: str = ""


@dataclass
class RawLog:
    """Commit log, newest first."""

    all: list[RawLogEntry] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.all)

    @property
    def latest(self) -> RawLogEntry | None:
        return self.all[0] if self.all else None


class VersionControlDriverPort(ABC):
    """
    Abstract interface for version control operations.

    Path-taking methods (``check_is_repo``, ``init``) work on any directory;
    the rest operate on the working tree rooted at ``root``.
    """

    @abstractmethod
    async def check_is_repo(self, path: Path) -> bool:
        """Return True if ``path`` is inside a git working tree."""
        ...

    @abstractmethod
    async def init(self, path: Path) -> None:
        """Create a new repository at ``path``."""
        ...

    @abstractmethod
    async def status(self, root: Path) -> RawStatus:
        """
        Full status including every untracked file, excluding ignored files.

        Args:
            root: Working tree root

        Returns:
            Parsed porcelain status
        """
        ...

    @abstractmethod
    async def add(self, root: Path, paths: list[str]) -> None:
        """Stage the given paths."""
        ...

    @abstractmethod
    async def reset(self, root: Path, args: list[str]) -> None:
        """Run ``git reset`` with the given arguments (may be empty)."""
        ...

    @abstractmethod
    async def commit(self, root: Path, message: str) -> None:
        """Commit the index with ``message``."""
        ...

    @abstractmethod
    async def checkout(self, root: Path, args: list[str]) -> None:
        """Run ``git checkout`` with the given arguments."""
        ...

    @abstractmethod
    async def log(self, root: Path, max_count: int | None = None) -> RawLog:
        """
        Commit log, newest first.

        A repository without commits yields an empty log rather than an error.
        """
        ...
