"""
Tests for the watchfiles-backed watcher.
"""

import asyncio
from pathlib import Path

import pytest
from watchfiles import Change

from treesync.adapters.watch import WatchfilesWatcher
from treesync.adapters.watch.watchfiles_watcher import IgnoreGlobFilter
from treesync.core.domain.enums import FileEventKind
from treesync.core.exceptions import WatcherError
from treesync.core.ports.file_watcher import DEFAULT_IGNORE_GLOBS


# =============================================================================
# IgnoreGlobFilter
# =============================================================================


class TestIgnoreGlobFilter:
    """Tests for root-relative ignore matching."""

    @pytest.fixture
    def ignore(self, tmp_path: Path) -> IgnoreGlobFilter:
        return IgnoreGlobFilter(tmp_path, [*DEFAULT_IGNORE_GLOBS, "build/**", "*.log", "docs/*.tmp"])

    @pytest.mark.parametrize(
        "relative",
        [
            ".env",
            ".git/index",
            ".git/objects/ab/cdef",
            "src/.cache/data",
            "node_modules/pkg/index.js",
            "web/node_modules/pkg/index.js",
            "build",
            "build/out.bin",
            "server.log",
            "logs/server.log",
            "docs/draft.tmp",
        ],
    )
    def test_ignored(self, ignore, tmp_path, relative):
        assert ignore.is_ignored(tmp_path / relative)

    @pytest.mark.parametrize(
        "relative",
        [
            "a.txt",
            "src/app.py",
            "docs/guide.md",
            "notes/docs/draft.tmp",
            "rebuild/out.bin",
        ],
    )
    def test_not_ignored(self, ignore, tmp_path, relative):
        assert not ignore.is_ignored(tmp_path / relative)

    def test_root_itself_is_not_ignored(self, ignore, tmp_path):
        assert not ignore.is_ignored(tmp_path)

    def test_paths_outside_root_are_ignored(self, ignore, tmp_path):
        assert ignore.is_ignored(tmp_path.parent / "elsewhere.txt")

    def test_callable_as_watch_filter(self, ignore, tmp_path):
        assert ignore(Change.added, str(tmp_path / "a.txt")) is True
        assert ignore(Change.modified, str(tmp_path / ".git" / "HEAD")) is False


# =============================================================================
# Binding
# =============================================================================


class TestWatch:
    """Tests for binding and closing watches."""

    @pytest.mark.asyncio
    async def test_missing_root(self, tmp_path):
        watcher = WatchfilesWatcher()

        with pytest.raises(WatcherError, match="does not exist") as exc_info:
            await watcher.watch(tmp_path / "missing", [], lambda e: None)

        assert exc_info.value.path == str(tmp_path / "missing")

    @pytest.mark.asyncio
    async def test_root_is_a_file(self, tmp_path):
        file_path = tmp_path / "file.txt"
        file_path.write_text("x")

        with pytest.raises(WatcherError, match="not a directory"):
            await WatchfilesWatcher().watch(file_path, [], lambda e: None)

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, tmp_path):
        handle = await WatchfilesWatcher(force_polling=True).watch(tmp_path, [], lambda e: None)

        assert handle.root == tmp_path
        assert not handle.closed

        await handle.close()
        await handle.close()

        assert handle.closed

    @pytest.mark.slow
    @pytest.mark.asyncio
    async def test_delivers_events_and_respects_ignores(self, tmp_path):
        received = []
        seen = asyncio.Event()

        def on_event(event):
            received.append(event)
            seen.set()

        watcher = WatchfilesWatcher(debounce_ms=10, force_polling=True)
        handle = await watcher.watch(tmp_path, list(DEFAULT_IGNORE_GLOBS), on_event)
        try:
            await asyncio.sleep(0.2)
            (tmp_path / ".hidden").write_text("ignored")
            (tmp_path / "a.txt").write_text("hello")
            await asyncio.wait_for(seen.wait(), timeout=5.0)
        finally:
            await handle.close()

        paths = {Path(event.path).name for event in received}
        assert "a.txt" in paths
        assert ".hidden" not in paths
        assert all(event.kind in FileEventKind for event in received)

    @pytest.mark.slow
    @pytest.mark.asyncio
    async def test_no_events_after_close(self, tmp_path):
        received = []
        handle = await WatchfilesWatcher(debounce_ms=10, force_polling=True).watch(
            tmp_path, [], received.append
        )
        await handle.close()

        (tmp_path / "late.txt").write_text("x")
        await asyncio.sleep(0.3)

        assert received == []
