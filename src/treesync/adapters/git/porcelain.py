"""
Porcelain v1 parsing.

Parses the output of ``git status --porcelain=v1 -b -z`` into a RawStatus.
With ``-z`` records are NUL separated and renamed/copied entries carry an
extra token holding the source path.
"""

from __future__ import annotations

import re

from treesync.core.ports.vcs_driver import RawFileStatus, RawLog, RawLogEntry, RawStatus


# Unmerged index/worktree pairs, see git-status(1) "Short Format".
CONFLICT_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})

LOG_FIELD_SEP = "\x1f"
LOG_RECORD_SEP = "\x1e"
LOG_FORMAT = LOG_FIELD_SEP.join(["%H", "%aI", "%s", "%D", "%an", "%ae"]) + LOG_RECORD_SEP

_BRANCH_RE = re.compile(
    r"^(?:No commits yet on |Initial commit on )?"
    r"(?P<current>.+?)"
    r"(?:\.\.\.(?P<tracking>\S+))?"
    r"(?: \[(?P<info>[^\]]*)\])?$"
)
_AHEAD_RE = re.compile(r"ahead (\d+)")
_BEHIND_RE = re.compile(r"behind (\d+)")


def _append(target: list[str], path: str) -> None:
    if path not in target:
        target.append(path)


def parse_branch_header(header: str, status: RawStatus) -> None:
    """Fill branch fields of ``status`` from a ``## ...`` header (without the prefix)."""
    header = header.strip()
    if header.startswith("HEAD (no branch)"):
        status.current = "HEAD"
        status.detached = True
        return

    match = _BRANCH_RE.match(header)
    if not match:
        status.current = header
        return

    status.current = match.group("current")
    status.tracking = match.group("tracking") or ""
    info = match.group("info") or ""
    ahead = _AHEAD_RE.search(info)
    behind = _BEHIND_RE.search(info)
    status.ahead = int(ahead.group(1)) if ahead else 0
    status.behind = int(behind.group(1)) if behind else 0


def _classify(status: RawStatus, index: str, working_dir: str, path: str) -> None:
    code = index + working_dir

    if code == "??":
        _append(status.not_added, path)
        return
    if code in CONFLICT_CODES:
        _append(status.conflicted, path)
        return

    if index == "A" or index == "C":
        _append(status.created, path)
    elif index == "M":
        _append(status.modified, path)
    elif index == "D":
        _append(status.deleted, path)
    if index in ("A", "M", "D", "R", "C"):
        _append(status.staged, path)

    if working_dir == "M":
        _append(status.modified, path)
    elif working_dir == "D":
        _append(status.deleted, path)
    elif working_dir == "A":
        # Intent-to-add (git add -N)
        _append(status.created, path)


def parse_porcelain_status(output: str) -> RawStatus:
    """
    Parse NUL separated porcelain v1 output.

    Args:
        output: stdout of ``git status --porcelain=v1 -b -z``

    Returns:
        RawStatus with branch info, categories and per-file records
    """
    status = RawStatus()
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not token:
            continue
        if token.startswith("## "):
            parse_branch_header(token[3:], status)
            continue
        if len(token) < 4 or token[2] != " ":
            continue

        x, y = token[0], token[1]
        path = token[3:]
        if x == "!" and y == "!":
            continue

        from_path: str | None = None
        if x in "RC" or y in "RC":
            if index < len(tokens):
                from_path = tokens[index]
            index += 1
            if x == "R" or y == "R":
                status.renamed.append((from_path or "", path))

        status.files.append(RawFileStatus(path=path, index=x, working_dir=y, from_path=from_path))
        _classify(status, x, y, path)

    return status


def parse_log(output: str) -> RawLog:
    """
    Parse ``git log --format=LOG_FORMAT`` output.

    Records end with LOG_RECORD_SEP and fields are split by LOG_FIELD_SEP.
    """
    entries: list[RawLogEntry] = []
    for record in output.split(LOG_RECORD_SEP):
        record = record.strip("\n")
        if not record:
            continue
        fields = record.split(LOG_FIELD_SEP)
        fields += [""] * (6 - len(fields))
        entries.append(
            RawLogEntry(
                hash=fields[0],
                date=fields[1],
                message=fields[2],
                refs=fields[3],
                author_name=fields[4],
                author_email=fields[5],
            )
        )
    return RawLog(all=entries)
