"""Process-wide logging setup for the API server and the CLI."""

import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

from src.utils.redaction import sanitize_error_message

TEXT_FORMAT = "%(levelname)s:%(name)s:%(message)s"


class JsonLineFormatter(logging.Formatter):
    """Format each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_error_message(record.getMessage(), max_length=4000),
        }
        if record.exc_info:
            entry["exc_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
        return json.dumps(entry)


class RedactingTextFormatter(logging.Formatter):
    """Plain text formatter that scrubs credentials from messages."""

    def format(self, record: logging.LogRecord) -> str:
        return sanitize_error_message(super().format(record), max_length=8000) or ""


def configure_logging(
    level: str = "info",
    log_format: str = "text",
    log_file: str | None = None,
) -> None:
    """Install stdout (and optional file) handlers on the root logger.

    Args:
        level: Level name, case-insensitive.
        log_format: "text" or "json".
        log_file: Optional path for an additional file handler.
    """
    formatter: logging.Formatter
    if log_format == "json":
        formatter = JsonLineFormatter()
    else:
        formatter = RedactingTextFormatter(TEXT_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level.upper(), handlers=handlers, force=True)
    logging.getLogger("src").setLevel(level.upper())
    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
