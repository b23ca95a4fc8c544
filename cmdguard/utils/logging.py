"""
Logging utilities for cmdguard.

This module provides a structured logging system for the application,
with support for different log levels, file output, and formatting.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

BASE_LOGGER = "cmdguard"


class LogFormatter(logging.Formatter):
    """Custom formatter for logs with color support."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def __init__(self, use_colors: bool = True):
        """
        Initialize the formatter.

        Args:
            use_colors (bool): Whether to use colors in the output.
        """
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record with optional colors.

        Args:
            record (logging.LogRecord): The log record to format.

        Returns:
            str: Formatted log message.
        """
        original_levelname = record.levelname

        if self.use_colors and record.levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[record.levelname]}"
                f"{record.levelname}{self.COLORS['RESET']}"
            )

        result = super().format(record)

        # Restore the original levelname for other handlers
        record.levelname = original_levelname

        return result


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    use_colors: bool = True,
) -> logging.Logger:
    """
    Set up the logging system.

    Args:
        log_level (str): Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file (Optional[Union[str, Path]]): Path to log file.
        use_colors (bool): Whether to use colors in console output.

    Returns:
        logging.Logger: Configured logger.
    """
    logger = logging.getLogger(BASE_LOGGER)

    # Clear any existing handlers to avoid duplicate logs
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    requested = (log_level or "INFO").upper()
    valid_names = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if requested not in valid_names:
        requested = "INFO"
    numeric_level = getattr(logging, requested, logging.INFO)
    logger.setLevel(numeric_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)

    from cmdguard.executor import platform_utils

    supports_colors = platform_utils.supports_ansi_colors() and use_colors
    console_handler.setFormatter(LogFormatter(use_colors=supports_colors))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        os.makedirs(log_path.parent, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        logger.addHandler(file_handler)

    logger.debug(f"Logging initialized at level {requested}")

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger with the specified name.

    Args:
        name (str): Logger name, relative to the base package.

    Returns:
        logging.Logger: Logger instance.
    """
    if name:
        return logging.getLogger(f"{BASE_LOGGER}.{name}")
    return logging.getLogger(BASE_LOGGER)


def initialize_logging(
    default_level: str = "INFO", debug: bool = False
) -> logging.Logger:
    """
    Initialize logging based on application settings.

    The analysis modules only ever call get_logger, so importing them never
    reads configuration; the CLI calls this once per run.

    Args:
        default_level (str): Level used when the settings do not name one.
        debug (bool): Force DEBUG level and the default debug log file.

    Returns:
        logging.Logger: Configured logger.
    """
    from cmdguard.config.settings import settings

    if debug:
        level = "DEBUG"
    else:
        level = settings.get("advanced", "log_level", default_level)

    return setup_logging(
        log_level=level,
        log_file=settings.get_log_file_path(debug=debug),
        use_colors=settings.get("ui", "use_colors", True),
    )
