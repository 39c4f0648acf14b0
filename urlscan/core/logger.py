"""
Client Logging.

Loggers under the "urlscan" namespace write coloured lines to stdout and,
on request, plain lines to a rotating file. Request headers pass through
sanitize_headers() before they are logged so the API key never appears.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Mapping

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LEVEL_ENV_VARS = ("URLSCAN_LOG_LEVEL", "LOG_LEVEL")

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[90m",
    logging.INFO: "\033[92m",
    logging.WARNING: "\033[93m",
    logging.ERROR: "\033[91m",
    logging.CRITICAL: "\033[1;91m",
}

SANITIZED_HEADERS = frozenset({"api-key", "authorization", "cookie"})


class ColoredFormatter(logging.Formatter):
    """Wraps each formatted line in the ANSI colour of its level."""

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelno)
        line = super().format(record)
        return f"{color}{line}{RESET}" if color else line


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = next((os.environ[var] for var in LEVEL_ENV_VARS if os.environ.get(var)), "INFO")
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def setup_logger(
    name: str,
    level: int | str | None = None,
    log_file: str | Path | None = None,
) -> logging.Logger:
    """
    Configure a urlscan logger once and return it.

    Args:
        name: Logger name, e.g. "urlscan.http.pipeline"
        level: Level name or number. Falls back to URLSCAN_LOG_LEVEL,
            then LOG_LEVEL, then INFO
        log_file: Also write uncoloured lines to this rotating file

    A logger that already has handlers is returned unchanged.

    Example:
        >>> logger = setup_logger("urlscan.client", log_file="logs/urlscan.log")
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    resolved = _resolve_level(level)
    logger.setLevel(resolved)
    logger.addHandler(_console_handler(resolved))
    if log_file is not None:
        logger.addHandler(_file_handler(Path(log_file), resolved))
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the named logger, configuring it with defaults on first use."""
    logger = logging.getLogger(name)
    return logger if logger.handlers else setup_logger(name)


def sanitize_headers(
    headers: Mapping[str, str],
    sensitive: Iterable[str] = SANITIZED_HEADERS,
) -> dict[str, str]:
    """Copy of headers with non-empty credential values replaced by '***'."""
    hidden = {h.lower() for h in sensitive}
    return {
        key: "***" if value and key.lower() in hidden else value
        for key, value in headers.items()
    }
