"""
Logging system for the BOM merger.
"""

from .logger_config import (
    setup_logging, get_logger, get_logging_stats, close_logging, verbosity_level, LoggerConfig
)
from .log_formatter import StructuredFormatter, ColoredFormatter, CompactFormatter
from .log_handler import RotatingFileHandler, ConsoleHandler

__all__ = [
    "setup_logging",
    "get_logger",
    "get_logging_stats",
    "close_logging",
    "verbosity_level",
    "LoggerConfig",
    "StructuredFormatter",
    "ColoredFormatter",
    "CompactFormatter",
    "RotatingFileHandler",
    "ConsoleHandler"
]
