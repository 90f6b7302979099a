"""
CLI Layer - Command line interface, console output and logging setup.
"""

from .app import create_parser, main, run
from .exit_codes import ExitCode
from .logging import ContextLogger, JSONFormatter, TextFormatter, get_logger, setup_logging
from .output import Colors, Console, Symbols


__all__ = [
    "Colors",
    "Console",
    "ContextLogger",
    "ExitCode",
    "JSONFormatter",
    "Symbols",
    "TextFormatter",
    "create_parser",
    "get_logger",
    "main",
    "run",
    "setup_logging",
]
