"""
Logging infrastructure for wglan.

Console logging with level colors, plus an optional rotating log file.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import (
    DEFAULT_LOG_LEVEL,
    LOG_MAX_BYTES,
    LOG_BACKUP_COUNT,
)


LOGGER_NAME = "wglan"

# Module-level logger
_logger: Optional[logging.Logger] = None


class ColorFormatter(logging.Formatter):
    """
    Formatter that adds colors for terminal output.
    """

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Color a copy so other handlers see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, "")
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(
    log_file: Optional[str] = None,
    log_level: str = DEFAULT_LOG_LEVEL,
    color: Optional[bool] = None,
) -> logging.Logger:
    """
    Configure the logging system.

    Args:
        log_file: Path of a rotating log file, or None for console only
        log_level: Minimum console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        color: Force colored output on or off (defaults to stderr being a TTY)

    Returns:
        Configured logger instance
    """
    global _logger

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Clear existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    if color is None:
        color = sys.stderr.isatty()
    fmt = "%(asctime)s [%(levelname)s] %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    console_handler.setFormatter(
        ColorFormatter(fmt, datefmt=datefmt) if color else logging.Formatter(fmt, datefmt=datefmt)
    )
    logger.addHandler(console_handler)

    # File handler with rotation
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)  # Capture everything to file
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt=datefmt,
        ))
        logger.addHandler(file_handler)

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the wglan logger, initializing if necessary."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


def format_block(title: str, lines: list[str]) -> str:
    """
    Format a titled block for log output.

    Args:
        title: Block title (displayed in brackets)
        lines: Content lines (will be indented)

    Returns:
        Formatted multi-line string
    """
    pad = "  "
    return "\n".join([f"[{title}]", *[pad + ln for ln in lines]])
