"""
Logging setup shared by the API process and the demo tooling.

Console only: containers and process supervisors collect stdout.

Usage:
    from bitsplit.logging_config import setup_logging
    setup_logging("INFO")
"""

import logging
import sys


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that are chatty at INFO/DEBUG and say nothing about the ledger
NOISY_LOGGERS = [
    "aiosqlite",
    "httpcore",
    "httpx",
    "asyncio",
]


def setup_logging(level: str | int = logging.INFO) -> logging.Logger:
    """
    Configure the root logger with a single console handler.

    Safe to call more than once: existing handlers are replaced rather than
    stacked, so reloading the app does not duplicate every line.

    Args:
        level: Level name ("INFO", "DEBUG", ...) or numeric level.

    Returns:
        The configured root logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
