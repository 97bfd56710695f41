"""
Configuration management for the BOM merger.
"""

from .config_manager import (
    ConfigManager, AppConfig, MergeConfig, ValidationConfig, LoadingConfig,
    OutputConfig, LoggingConfig, get_config_manager, get_config, reset_config_manager
)

__all__ = [
    "ConfigManager",
    "AppConfig",
    "MergeConfig",
    "ValidationConfig",
    "LoadingConfig",
    "OutputConfig",
    "LoggingConfig",
    "get_config_manager",
    "get_config",
    "reset_config_manager"
]
