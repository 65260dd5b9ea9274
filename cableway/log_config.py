"""
cableway/log_config.py - Logging setup

The engine only creates module loggers under the "cableway" namespace;
handlers are the caller's business. configure_logging is a convenience
for scripts and tests.
"""

from typing import Optional
import json
import logging
import sys

__all__ = ['configure_logging', 'JSONFormatter']

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps({
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        })


def configure_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """
    Attach handlers to the "cableway" logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Emit JSON lines instead of plain text

    Returns:
        The package logger
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = JSONFormatter() if json_format else logging.Formatter(DEFAULT_FORMAT)

    package_logger = logging.getLogger("cableway")
    package_logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    package_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        package_logger.addHandler(file_handler)

    return package_logger
