"""
Log formatters for structured and colored merge diagnostics.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional


class StructuredFormatter(logging.Formatter):
    """
    JSON lines formatter for machine-readable merge logs.

    Each record becomes one JSON object. Values passed through ``extra``
    (for example ``file_path`` or ``components``) are kept under ``extra``.
    """

    # Attributes every LogRecord carries
    _STANDARD_FIELDS = frozenset({
        'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
        'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
        'thread', 'threadName', 'processName', 'process', 'exc_info', 'exc_text',
        'stack_info', 'message', 'taskName'
    })

    def __init__(self, include_extra: bool = True):
        """
        Initialize structured formatter.

        Args:
            include_extra: Whether to include extra fields from log records
        """
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno
        }

        if record.threadName and record.threadName != "MainThread":
            log_entry["thread"] = record.threadName

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            extra_fields = self._extract_extra_fields(record)
            if extra_fields:
                log_entry["extra"] = extra_fields

        return json.dumps(log_entry, default=str, ensure_ascii=False)

    def _extract_extra_fields(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Extract fields added through ``extra``."""
        return {
            key: value for key, value in record.__dict__.items()
            if key not in self._STANDARD_FIELDS and not key.startswith('_')
        }


class ColoredFormatter(logging.Formatter):
    """
    Console formatter coloring records by level with ANSI codes.
    """

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'
    BOLD = '\033[1m'

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None):
        super().__init__(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record with colors.

        Args:
            record: Log record to format

        Returns:
            Colored log string
        """
        formatted = super().format(record)

        level_color = self.COLORS.get(record.levelname)
        if not level_color:
            return formatted

        bold_level = f"{self.BOLD}{record.levelname}{self.RESET}{level_color}"
        formatted = formatted.replace(record.levelname, bold_level, 1)
        return f"{level_color}{formatted}{self.RESET}"


class CompactFormatter(logging.Formatter):
    """
    Compact formatter for console progress output.

    Format: ``HH:MM:SS L logger: message``, with only the last part of
    the logger name.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        short_logger = record.name.rsplit('.', 1)[-1]

        formatted = f"{timestamp} {record.levelname[0]} {short_logger}: {record.getMessage()}"

        if record.exc_info:
            formatted += f" | {self.formatException(record.exc_info)}"

        return formatted
