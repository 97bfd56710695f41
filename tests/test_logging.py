import io
import json
import logging
from pathlib import Path

from bom_merger.logging import (
    CompactFormatter, ConsoleHandler, LoggerConfig, StructuredFormatter, get_logging_stats,
    setup_logging, verbosity_level
)


def make_record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("bom_merger.mergers.flat_merger", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_verbosity_maps_to_levels() -> None:
    assert verbosity_level(0) == "WARNING"
    assert verbosity_level(1) == "INFO"
    assert verbosity_level(2) == "DEBUG"
    assert verbosity_level(5) == "DEBUG"


def test_structured_formatter_emits_json_with_extra_fields() -> None:
    line = StructuredFormatter().format(make_record("merged", components=3))

    entry = json.loads(line)
    assert entry["level"] == "INFO"
    assert entry["logger"] == "bom_merger.mergers.flat_merger"
    assert entry["message"] == "merged"
    assert entry["extra"] == {"components": 3}


def test_compact_formatter_shortens_logger_name() -> None:
    line = CompactFormatter().format(make_record("merged"))

    assert line.endswith(" I flat_merger: merged")


def test_console_handler_writes_to_given_stream() -> None:
    stream = io.StringIO()
    handler = ConsoleHandler(stream)
    handler.setFormatter(CompactFormatter())

    handler.emit(make_record("hello"))

    assert "hello" in stream.getvalue()
    assert handler.records_written == 1
    assert not handler.is_tty()


def test_setup_logging_installs_console_and_file_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "merge.log"
    setup_logging(LoggerConfig(level="DEBUG", console_level="WARNING", file_path=str(log_file)))

    logging.getLogger("bom_merger.test").debug("file only")

    stats = get_logging_stats()
    assert stats["handlers_active"] == 2
    assert logging.getLogger().level == logging.DEBUG
    assert "file only" in log_file.read_text(encoding="utf-8")
    assert stats["file"]["records_written"] >= 1


def test_setup_logging_replaces_previous_handlers() -> None:
    setup_logging(LoggerConfig(level="INFO"))
    setup_logging(LoggerConfig(level="INFO"))

    consoles = [handler for handler in logging.getLogger().handlers if isinstance(handler, ConsoleHandler)]
    assert len(consoles) == 1
