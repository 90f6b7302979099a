"""
Config adapters - ConfigProviderPort implementations.
"""

from .environment import ENV_KEYS, EnvironmentConfigProvider
from .file_config import CONFIG_FILE_NAMES, FileConfigProvider, build_app_config, find_config_file


__all__ = [
    "CONFIG_FILE_NAMES",
    "ENV_KEYS",
    "EnvironmentConfigProvider",
    "FileConfigProvider",
    "build_app_config",
    "find_config_file",
]
