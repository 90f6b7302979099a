"""
Status Mapper - Driver output to domain entities.

Porcelain parsing belongs to the driver; the mapper only selects the stable
fields and derives ``is_clean``.
"""

from treesync.core.domain.entities import CommitRecord, FileStatusEntry, WorkingTreeStatus
from treesync.core.ports.vcs_driver import RawLog, RawStatus


class StatusMapper:
    """Pure conversions from RawStatus/RawLog to domain entities."""

    @staticmethod
    def map_status(raw: RawStatus) -> WorkingTreeStatus:
        categories = {
            "staged": tuple(raw.staged),
            "not_added": tuple(raw.not_added),
            "created": tuple(raw.created),
            "modified": tuple(raw.modified),
            "deleted": tuple(raw.deleted),
            "conflicted": tuple(raw.conflicted),
        }
        files = tuple(
            FileStatusEntry(
                path=f.path,
                index_status_code=f.index,
                working_dir_status_code=f.working_dir,
                renamed_from=f.from_path,
            )
            for f in raw.files
        )

        return WorkingTreeStatus(
            current_branch=raw.current or "",
            tracking_branch=raw.tracking or "",
            ahead=raw.ahead,
            behind=raw.behind,
            files=files,
            is_clean=not any(categories.values()),
            detached=raw.detached,
            **categories,
        )

    @staticmethod
    def map_log(raw: RawLog) -> list[CommitRecord]:
        """Map log entries, keeping the driver's newest-first order."""
        return [
            CommitRecord(
                hash=entry.hash,
                date=entry.date,
                message=entry.message,
                refs=entry.refs,
                author_name=entry.author_name,
                author_email=entry.author_email,
            )
            for entry in raw.all
        ]
