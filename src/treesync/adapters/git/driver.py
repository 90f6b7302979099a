"""
Git CLI Driver - VersionControlDriverPort backed by the git binary.

Every call is an asyncio subprocess, so callers suspend without blocking
the event loop. Any failure (non-zero exit, missing binary, timeout) is
raised as GitCommandError.
"""

import asyncio
import logging
from pathlib import Path

from treesync.core.exceptions import GitCommandError
from treesync.core.ports.vcs_driver import RawLog, RawStatus, VersionControlDriverPort

from .porcelain import LOG_FORMAT, parse_log, parse_porcelain_status


logger = logging.getLogger("GitCliDriver")

STATUS_ARGS = ["status", "--porcelain=v1", "-b", "-z", "--untracked-files=all", "--ignored=no"]

# stderr fragments git prints for a repository whose HEAD has no commits
_UNBORN_HEAD_MARKERS = ("does not have any commits yet", "bad default revision 'HEAD'")


class GitCliDriver(VersionControlDriverPort):
    """
    Runs git subcommands in a working tree.

    Example:
        >>> driver = GitCliDriver()
        >>> raw = await driver.status(Path("/repo"))
        >>> raw.not_added
        ['a.txt']
    """

    def __init__(self, git_binary: str = "git", timeout: float | None = None):
        """
        Initialize the driver.

        Args:
            git_binary: Name or path of the git executable
            timeout: Seconds before a git process is killed (None = no limit)
        """
        self.git_binary = git_binary
        self.timeout = timeout

    async def _run(self, args: list[str], cwd: Path | None) -> str:
        """
        Run ``git <args>`` and return stdout.

        Raises:
            GitCommandError: On any failure
        """
        logger.debug(f"git {' '.join(args)} (cwd={cwd})")
        try:
            proc = await asyncio.create_subprocess_exec(
                self.git_binary,
                *args,
                cwd=str(cwd) if cwd is not None else None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise GitCommandError(
                f"Could not run {self.git_binary}: {e}",
                command=args,
                cause=e,
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise GitCommandError(
                f"git {args[0]} timed out after {self.timeout}s",
                command=args,
                cause=e,
            ) from e

        out = stdout.decode("utf-8", errors="replace")
        err = stderr.decode("utf-8", errors="replace").strip()
        if proc.returncode != 0:
            raise GitCommandError(
                err or f"git {args[0]} exited with status {proc.returncode}",
                command=args,
                exit_code=proc.returncode,
                stderr=err,
            )
        return out

    # -------------------------------------------------------------------------
    # Repository checks
    # -------------------------------------------------------------------------

    async def check_is_repo(self, path: Path) -> bool:
        if not Path(path).is_dir():
            return False
        try:
            out = await self._run(["rev-parse", "--is-inside-work-tree"], cwd=path)
        except GitCommandError as e:
            if "not a git repository" in e.stderr.lower():
                return False
            raise
        return out.strip() == "true"

    async def init(self, path: Path) -> None:
        await self._run(["init", "--", str(path)], cwd=None)

    # -------------------------------------------------------------------------
    # Status / log
    # -------------------------------------------------------------------------

    async def status(self, root: Path) -> RawStatus:
        out = await self._run(STATUS_ARGS, cwd=root)
        return parse_porcelain_status(out)

    async def log(self, root: Path, max_count: int | None = None) -> RawLog:
        args = ["log", f"--format={LOG_FORMAT}"]
        if max_count is not None:
            args.append(f"--max-count={max_count}")
        try:
            out = await self._run(args, cwd=root)
        except GitCommandError as e:
            if any(marker in e.stderr for marker in _UNBORN_HEAD_MARKERS):
                return RawLog()
            raise
        return parse_log(out)

    # -------------------------------------------------------------------------
    # Index / working tree mutations
    # -------------------------------------------------------------------------

    async def add(self, root: Path, paths: list[str]) -> None:
        await self._run(["add", "--", *paths], cwd=root)

    async def reset(self, root: Path, args: list[str]) -> None:
        await self._run(["reset", *args], cwd=root)

    async def commit(self, root: Path, message: str) -> None:
        await self._run(["commit", "-m", message], cwd=root)

    async def checkout(self, root: Path, args: list[str]) -> None:
        await self._run(["checkout", *args], cwd=root)
