"""
Logging for the booking engine.

Module loggers come from get_logger(), which takes level, directory and
file logging from config.settings. Store code wraps its logger in a
BookingLogAdapter so every line about a booking carries its id.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, MutableMapping, Optional, Tuple

DEFAULT_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(filename)s:%(lineno)d] - %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUPS = 5


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _file_handler(
    path: Path, level: int, formatter: logging.Formatter, max_bytes: int, backup_count: int
) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    name: str,
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_dir: str = "logs",
    max_bytes: int = MAX_LOG_BYTES,
    backup_count: int = LOG_BACKUPS,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Attach console (and optionally rotating file) handlers to a logger.

    Args:
        name: Logger name (typically __name__)
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: File name inside log_dir; no file handler when omitted
        log_dir: Directory for log files
        max_bytes: Size at which the file is rotated
        backup_count: Number of rotated files to keep
        format_string: Custom record format

    Returns:
        The configured logger. A logger that already has handlers is
        returned unchanged.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt=DATE_FORMAT)

    logger.addHandler(_console_handler(level, formatter))
    if log_file:
        logger.addHandler(
            _file_handler(Path(log_dir) / log_file, level, formatter, max_bytes, backup_count)
        )
    return logger


def get_logger(name: str, log_file: Optional[str] = None) -> logging.Logger:
    """
    Logger configured from application settings.

    `log_file` is only used when settings.log_to_file is on.
    """
    from config import settings

    return setup_logging(
        name,
        log_level=settings.log_level,
        log_file=log_file if settings.log_to_file else None,
        log_dir=settings.log_dir,
    )


class BookingLogAdapter(logging.LoggerAdapter):
    """Prefixes messages with the booking they concern."""

    def __init__(self, logger: logging.Logger, booking_id: Optional[str]):
        super().__init__(logger, {"booking_id": booking_id or "new"})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        return f"[booking {self.extra['booking_id']}] {msg}", kwargs


def for_booking(logger: logging.Logger, booking_id: Optional[str]) -> BookingLogAdapter:
    return BookingLogAdapter(logger, booking_id)
