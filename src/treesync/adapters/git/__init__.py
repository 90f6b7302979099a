"""
Git adapter - VersionControlDriverPort implementation using the git CLI.
"""

from .driver import GitCliDriver
from .porcelain import parse_log, parse_porcelain_status


__all__ = ["GitCliDriver", "parse_log", "parse_porcelain_status"]
