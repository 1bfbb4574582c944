"""
Logging configuration for photo curator.

Sets up loguru with appropriate levels and formatting.
"""

import sys
from pathlib import Path

from loguru import logger
from typing import Any

SESSION_LOG_NAME = "photo_curator.log"
DEBUG_LOG_NAME = "photo_curator_debug.log"


def setup_logging(level: str = "INFO", debug: bool = False, log_dir: Path | None = None) -> Path:
    """
    Configure loguru logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        debug: If True, enable debug logging and more verbose output
        log_dir: Directory for the log files (default: current directory), created if missing

    Returns:
        Path of the session log file
    """
    logger.remove()

    log_level = "DEBUG" if debug else level
    directory = Path(log_dir) if log_dir is not None else Path.cwd()
    directory.mkdir(parents=True, exist_ok=True)
    session_log = directory / SESSION_LOG_NAME

    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>",
    )

    # Session log keeps extraction warnings and judgments for later review
    logger.add(
        session_log,
        level="INFO",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
    )

    if debug:
        logger.add(
            directory / DEBUG_LOG_NAME,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="50 MB",
            retention="3 days",
            compression="zip",
        )

    return session_log


def get_logger(name: str | None = None) -> Any:
    """
    Get a logger instance.

    Args:
        name: Optional name for the logger (defaults to "photo_curator")

    Returns:
        Logger instance bound to the given name
    """
    return logger.bind(name=name or "photo_curator")
