"""
Output - Console output formatting.

Provides pretty-printed output with colors and formatting.
"""

import json
import sys
from typing import Any

from treesync.core.domain.entities import CommitRecord, WorkingTreeStatus
from treesync.core.ports.status_notifier import StatusEvent


class Colors:
    """
    ANSI color codes for terminal output.

    Attributes:
        RESET: Reset all formatting to default.
        BOLD: Make text bold.
        DIM: Make text dimmed/faded.
        RED: Red text color.
        GREEN: Green text color.
        YELLOW: Yellow text color.
        BLUE: Blue text color.
        MAGENTA: Magenta text color.
        CYAN: Cyan text color.
    """

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"


class Symbols:
    """Unicode symbols for terminal output."""

    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    DOT = "•"
    WARN = "⚠"
    INFO = "ℹ"
    UP = "↑"
    DOWN = "↓"

    BOX_H = "─"


# Category name, label, colour for status rendering
STATUS_SECTIONS = (
    ("staged", "Staged", Colors.GREEN),
    ("created", "Created", Colors.GREEN),
    ("modified", "Modified", Colors.YELLOW),
    ("deleted", "Deleted", Colors.RED),
    ("not_added", "Untracked", Colors.MAGENTA),
    ("conflicted", "Conflicted", Colors.RED),
)


class Console:
    """
    Console output helper with colors and formatting.

    Attributes:
        color: Whether to use ANSI color codes.
        verbose: Whether to print debug messages.
        quiet: Whether to suppress most output.
        json_mode: Whether to print JSON documents instead of text.
    """

    def __init__(
        self,
        color: bool = True,
        verbose: bool = False,
        quiet: bool = False,
        json_mode: bool = False,
    ):
        """
        Initialize the console output helper.

        Args:
            color: Enable colored output. Automatically disabled if stdout is not a TTY.
            verbose: Enable verbose debug output.
            quiet: Suppress most output, only show errors.
            json_mode: Output JSON instead of text.
        """
        self.json_mode = json_mode
        self.color = color and sys.stdout.isatty() and not json_mode
        self.verbose = verbose
        self.quiet = quiet or json_mode

        if self.quiet:
            self.verbose = False

    def _c(self, text: str, *codes: str) -> str:
        """
        Apply color codes to text.

        Returns:
            Colorized text with reset code appended, or plain text if color is disabled.
        """
        if not self.color:
            return text
        return "".join(codes) + text + Colors.RESET

    def print(self, text: str = "", force: bool = False) -> None:
        if self.quiet and not force:
            return
        print(text, flush=True)

    def json(self, data: Any) -> None:
        """Print one JSON document (always, regardless of quiet mode)."""
        print(json.dumps(data, default=str), flush=True)

    def header(self, text: str) -> None:
        if self.quiet:
            return
        width = max(len(text) + 4, 50)
        border = self._c(Symbols.BOX_H * width, Colors.CYAN) if self.color else "-" * width

        self.print()
        self.print(border)
        self.print(self._c(f"  {text}", Colors.BOLD, Colors.CYAN))
        self.print(border)
        self.print()

    def section(self, text: str) -> None:
        if self.quiet:
            return
        self.print()
        self.print(self._c(f"{Symbols.ARROW} {text}", Colors.BOLD, Colors.BLUE))

    def success(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"  {Symbols.CHECK} {text}", Colors.GREEN))

    def error(self, text: str) -> None:
        """
        Print an error message with cross symbol.

        Always prints (to stderr), even in quiet and JSON mode.
        """
        print(self._c(f"  {Symbols.CROSS} {text}", Colors.RED), file=sys.stderr, flush=True)

    def config_errors(self, errors: list[str]) -> None:
        """Print configuration errors with a hint about where settings come from."""
        self.error("Configuration errors:")
        for err in errors:
            print(f"    {Symbols.DOT} {err}", file=sys.stderr)
        print(
            "    Settings are read from .treesync.yaml/.treesync.toml, "
            "[tool.treesync] in pyproject.toml and TREESYNC_* environment variables.",
            file=sys.stderr,
        )

    def warning(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"  {Symbols.WARN} {text}", Colors.YELLOW))

    def info(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"  {Symbols.INFO} {text}", Colors.CYAN))

    def detail(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"    {text}", Colors.DIM))

    def debug(self, text: str) -> None:
        """Print debug message (only visible in verbose mode)."""
        if self.verbose:
            self.print(self._c(f"  [DEBUG] {text}", Colors.DIM))

    def item(self, text: str, color: str | None = None) -> None:
        if self.quiet:
            return
        label = self._c(text, color) if color else text
        self.print(f"    {Symbols.DOT} {label}")

    def table(self, headers: list[str], rows: list[list[str]]) -> None:
        """
        Print a formatted table with headers.

        Column widths are computed from the content.
        """
        if self.quiet:
            return
        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(cell)))

        header_line = "  " + "  ".join(
            self._c(h.ljust(widths[i]), Colors.BOLD) for i, h in enumerate(headers)
        )
        self.print(header_line)
        self.print("  " + "  ".join("-" * w for w in widths))

        for row in rows:
            row_line = "  " + "  ".join(
                str(cell).ljust(widths[i]) if i < len(widths) else str(cell)
                for i, cell in enumerate(row)
            )
            self.print(row_line)

    # -------------------------------------------------------------------------
    # Domain rendering
    # -------------------------------------------------------------------------

    def branch_line(self, status: WorkingTreeStatus) -> str:
        """One-line branch summary, e.g. ``main → origin/main ↑1 ↓2``."""
        if status.detached:
            line = self._c("HEAD (detached)", Colors.YELLOW)
        else:
            line = self._c(status.current_branch or "?", Colors.BOLD)
        if status.tracking_branch:
            line += f" {Symbols.ARROW} {status.tracking_branch}"
        if status.ahead:
            line += self._c(f" {Symbols.UP}{status.ahead}", Colors.GREEN)
        if status.behind:
            line += self._c(f" {Symbols.DOWN}{status.behind}", Colors.RED)
        return line

    def status(self, status: WorkingTreeStatus) -> None:
        """Print a working tree status."""
        if self.json_mode:
            self.json(status.to_dict())
            return

        self.print(f"  Branch: {self.branch_line(status)}")
        if status.is_clean:
            self.success("Working tree clean")
            return

        categories = status.categories()
        for key, label, color in STATUS_SECTIONS:
            paths = categories[key]
            if not paths:
                continue
            self.section(f"{label} ({len(paths)})")
            for path in paths:
                self.item(path, color)

    def commits(self, commits: list[CommitRecord]) -> None:
        """Print a commit log, newest first."""
        if self.json_mode:
            self.json([c.to_dict() for c in commits])
            return
        if not commits:
            self.info("No commits yet")
            return
        self.table(
            ["Commit", "Date", "Author", "Message"],
            [[c.short_hash, c.date[:10], c.author_name, c.message] for c in commits],
        )

    def status_event(self, event: StatusEvent) -> None:
        """Print one status-changed event (used by watch mode)."""
        if self.json_mode:
            self.json(event.to_dict())
            return

        stamp = event.timestamp.astimezone().strftime("%H:%M:%S")
        if event.error is not None:
            self.error(f"[{stamp}] {event.error.get('code')}: {event.error.get('message')}")
            return
        if event.status is None:
            return
        self.print()
        self.print(self._c(f"[{stamp}] status changed", Colors.DIM))
        self.status(event.status)
