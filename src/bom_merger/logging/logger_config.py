"""
Logger configuration and setup for the BOM merger.
"""

import logging
from typing import Optional, Dict, Any
from dataclasses import dataclass

from ..config import get_config
from .log_formatter import StructuredFormatter, ColoredFormatter, CompactFormatter
from .log_handler import RotatingFileHandler, ConsoleHandler

_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}


@dataclass
class LoggerConfig:
    """Configuration for logging system."""
    level: str = "INFO"
    console_level: Optional[str] = None
    file_path: Optional[str] = None
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_file_size: int = 10  # MB
    backup_count: int = 5
    enable_console: bool = True
    enable_structured: bool = False
    enable_colors: bool = True

    @classmethod
    def from_app_config(cls, console_level: Optional[str] = None) -> 'LoggerConfig':
        """
        Build a logger configuration from the application configuration.

        Args:
            console_level: Console level overriding the configured level

        Returns:
            Logger configuration
        """
        logging_config = get_config().logging
        return cls(
            level=logging_config.level,
            console_level=console_level,
            file_path=logging_config.file,
            format_string=logging_config.format,
            max_file_size=logging_config.max_file_size,
            backup_count=logging_config.backup_count,
            enable_structured=logging_config.structured
        )


def verbosity_level(verbose: int) -> str:
    """Map a ``-v`` count to a console log level."""
    if verbose <= 0:
        return "WARNING"
    elif verbose == 1:
        return "INFO"
    return "DEBUG"


class LoggingManager:
    """
    Centralized logging manager for the BOM merger.

    Installs a console handler on stderr and, when a log file is
    configured, a rotating file handler on the root logger.
    """

    def __init__(self):
        """Initialize the logging manager."""
        self._handlers: Dict[str, logging.Handler] = {}
        self.config: Optional[LoggerConfig] = None

    def setup_logging(self, config: Optional[LoggerConfig] = None) -> None:
        """
        Set up the logging system, replacing handlers installed earlier.

        Args:
            config: Logging configuration (uses app config if not provided)
        """
        if config is None:
            config = LoggerConfig.from_app_config()

        self.close_handlers()
        self.config = config

        root_logger = logging.getLogger()
        levels = []

        if config.enable_console:
            console_handler = self._create_console_handler(config)
            root_logger.addHandler(console_handler)
            self._handlers['console'] = console_handler
            levels.append(console_handler.level)

        if config.file_path:
            file_handler = self._create_file_handler(config)
            root_logger.addHandler(file_handler)
            self._handlers['file'] = file_handler
            levels.append(file_handler.level)

        root_logger.setLevel(min(levels) if levels else self._get_log_level(config.level))

        logging.getLogger(__name__).debug(f"Logging system initialized with level: {config.level}")

    def _create_console_handler(self, config: LoggerConfig) -> logging.Handler:
        """Create console handler with appropriate formatter."""
        handler = ConsoleHandler()
        handler.setLevel(self._get_log_level(config.console_level or config.level))

        if config.enable_structured:
            formatter = StructuredFormatter()
        elif config.enable_colors and handler.is_tty():
            formatter = ColoredFormatter(config.format_string)
        else:
            formatter = CompactFormatter()

        handler.setFormatter(formatter)
        return handler

    def _create_file_handler(self, config: LoggerConfig) -> logging.Handler:
        """Create rotating file handler."""
        handler = RotatingFileHandler(
            filename=config.file_path,
            maxBytes=config.max_file_size * 1024 * 1024,
            backupCount=config.backup_count
        )
        handler.setLevel(self._get_log_level(config.level))

        if config.enable_structured:
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(logging.Formatter(config.format_string))
        return handler

    def _get_log_level(self, level_str: str) -> int:
        """Convert string log level to logging constant."""
        return _LEVELS.get(level_str.upper(), logging.INFO)

    def get_log_stats(self) -> Dict[str, Any]:
        """
        Get logging system statistics.

        Returns:
            Dictionary with logging statistics
        """
        stats = {
            "handlers_active": len(self._handlers),
            "current_level": self.config.level if self.config else "Unknown"
        }
        for name, handler in self._handlers.items():
            if hasattr(handler, 'get_stats'):
                stats[name] = handler.get_stats()
        return stats

    def close_handlers(self) -> None:
        """Detach and close all installed handlers."""
        root_logger = logging.getLogger()
        for handler in self._handlers.values():
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(config: Optional[LoggerConfig] = None) -> None:
    """
    Set up the global logging system.

    Args:
        config: Logging configuration
    """
    _logging_manager.setup_logging(config)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def get_logging_stats() -> Dict[str, Any]:
    """Get logging system statistics."""
    return _logging_manager.get_log_stats()


def close_logging() -> None:
    """Close logging system and clean up resources."""
    _logging_manager.close_handlers()
