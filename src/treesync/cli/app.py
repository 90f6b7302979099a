"""
CLI Application - Command line interface for treesync.

Commands:
    treesync status [PATH]      Print the working tree status
    treesync log [PATH] [-n N]  Print the commit log
    treesync watch [PATH]       Print every status change until interrupted
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from treesync import __version__
from treesync.adapters.config import EnvironmentConfigProvider
from treesync.core.exceptions import ConfigError, TreeSyncError
from treesync.core.ports.config_provider import LOG_FORMATS, LOG_LEVELS, AppConfig
from treesync.core.services import create_sync_engine

from .exit_codes import ExitCode
from .logging import setup_logging
from .output import Console


logger = logging.getLogger("treesync")


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="treesync",
        description="Keep a live view of a git working tree's status",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the status of the current repository
  treesync status

  # Last 10 commits as JSON
  treesync --json log ~/code/project -n 10

  # Print status changes as files are edited
  treesync watch ~/code/project --quiet-period-ms 500
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    config_group = parser.add_argument_group("Configuration")
    config_group.add_argument(
        "--config",
        "-c",
        type=str,
        help="Path to config file (.treesync.yaml, .treesync.toml or pyproject.toml)",
    )

    output_group = parser.add_argument_group("Output")
    output_group.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    output_group.add_argument("--no-color", action="store_true", help="Disable colored output")
    output_group.add_argument("--json", action="store_true", help="Print JSON instead of text")
    output_group.add_argument(
        "--log-level",
        choices=[level.lower() for level in LOG_LEVELS],
        type=str.lower,
        help="Log level (default: info)",
    )
    output_group.add_argument(
        "--log-format", choices=LOG_FORMATS, help="Log format (default: text)"
    )
    output_group.add_argument("--log-file", type=str, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    status_parser = subparsers.add_parser("status", help="Print the working tree status")
    status_parser.add_argument("path", nargs="?", help="Repository root (default: current directory)")

    log_parser = subparsers.add_parser("log", help="Print the commit log, newest first")
    log_parser.add_argument("path", nargs="?", help="Repository root (default: current directory)")
    log_parser.add_argument(
        "-n", "--max-count", type=int, dest="max_count", help="Number of commits to show"
    )

    watch_parser = subparsers.add_parser("watch", help="Print every status change until interrupted")
    watch_parser.add_argument("path", nargs="?", help="Repository root (default: current directory)")
    watch_parser.add_argument(
        "--quiet-period-ms",
        type=int,
        dest="quiet_period_ms",
        help="Milliseconds without file changes before refreshing (default: 300)",
    )

    return parser


def resolve_root(args: argparse.Namespace, config: AppConfig) -> Path:
    """Root from the command line, then config, then the working directory."""
    raw = getattr(args, "path", None) or config.root_path or "."
    return Path(raw).expanduser().resolve()


def report_error(console: Console, error: TreeSyncError) -> ExitCode:
    console.error(str(error))
    return ExitCode.from_exception(error)


async def run_status(args: argparse.Namespace, config: AppConfig, console: Console) -> int:
    """Print the status of one repository."""
    root = resolve_root(args, config)

    async with create_sync_engine(config) as engine:
        result = await engine.initialize(root)
        if result.is_err():
            return report_error(console, result.unwrap_err())

        console.header(f"treesync status: {root}")
        console.status(result.unwrap())
    return ExitCode.SUCCESS


async def run_log(args: argparse.Namespace, config: AppConfig, console: Console) -> int:
    """Print the commit log of one repository."""
    root = resolve_root(args, config)

    async with create_sync_engine(config) as engine:
        result = await engine.initialize(root)
        if result.is_err():
            return report_error(console, result.unwrap_err())

        log_result = await engine.get_log(max_count=getattr(args, "max_count", None))
        if log_result.is_err():
            return report_error(console, log_result.unwrap_err())

        console.header(f"treesync log: {root}")
        console.commits(log_result.unwrap())
    return ExitCode.SUCCESS


async def run_watch(
    args: argparse.Namespace,
    config: AppConfig,
    console: Console,
    stop: asyncio.Event | None = None,
) -> int:
    """
    Watch one repository and print every status-changed event.

    Runs until ``stop`` is set or the task is cancelled (Ctrl+C), then
    disposes the engine.
    """
    root = resolve_root(args, config)
    stop = stop or asyncio.Event()

    engine = create_sync_engine(config)
    unsubscribe = engine.subscribe(console.status_event)
    try:
        result = await engine.initialize(root)
        if result.is_err():
            return report_error(console, result.unwrap_err())

        console.header(f"treesync watch: {root}")
        console.status(result.unwrap())
        console.info(
            f"Watching for changes (quiet period {config.engine.quiet_period_ms}ms). "
            "Press Ctrl+C to stop."
        )
        await stop.wait()
    finally:
        unsubscribe()
        await engine.dispose()

    stats = engine.stats
    console.detail(
        f"Watched for {stats.uptime_formatted}: {stats.events_received} events, "
        f"{stats.refreshes_succeeded} refreshes, {stats.refreshes_failed} failed"
    )
    return ExitCode.SUCCESS


COMMANDS = {
    "status": run_status,
    "log": run_log,
    "watch": run_watch,
}


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the treesync CLI.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return ExitCode.ERROR

    console = Console(
        color=not args.no_color,
        verbose=args.verbose,
        json_mode=args.json,
    )

    config_file = Path(args.config) if args.config else None
    provider = EnvironmentConfigProvider(config_file=config_file, cli_overrides=vars(args))
    errors = provider.validate()
    if errors:
        console.config_errors(errors)
        return ExitCode.CONFIG_ERROR

    try:
        config = provider.load()
    except ConfigError as e:
        console.config_errors([str(e)])
        return ExitCode.CONFIG_ERROR

    log_level = logging.DEBUG if args.verbose else config.log_level
    setup_logging(level=log_level, log_format=config.log_format, log_file=config.log_file)
    logger.debug(f"Configuration loaded from {provider.name}")

    try:
        return asyncio.run(COMMANDS[args.command](args, config, console))
    except KeyboardInterrupt:
        console.print()
        console.warning("Interrupted")
        return ExitCode.INTERRUPTED
    except Exception as e:
        console.error(f"Unexpected error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return ExitCode.from_exception(e)


def run() -> None:
    """
    Entry point for the console script.

    Calls main() and exits with its return code.
    """
    sys.exit(main())


if __name__ == "__main__":
    run()
