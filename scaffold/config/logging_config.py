"""
Logging Configuration for the build and deploy scripts

Provides structured logging with:
- Timestamps
- Log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
- File rotation (1 file per day)
- Separate error log
- Console and file handlers

Every module logs through ``logging.getLogger(__name__)``; configuring the
``scaffold`` logger once at the CLI boundary covers the whole package.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path
from typing import Optional


# Log directory (override with SCAFFOLD_LOG_DIR)
LOG_DIR = Path(os.getenv("SCAFFOLD_LOG_DIR", "logs"))

# Log formats
DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
SIMPLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER = "scaffold"


def setup_logger(
    name: str = ROOT_LOGGER,
    level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    log_file: Optional[str] = None,
    console: bool = True,
    detailed: bool = False,
) -> logging.Logger:
    """
    Setup a logger with console and file handlers.

    Args:
        name: Logger name (``scaffold`` covers every module of the package)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files (defaults to LOG_DIR)
        log_file: Optional log file name (defaults to name.log)
        console: Whether to log to console
        detailed: Whether to use detailed format (includes file/line)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger("scaffold", level=logging.DEBUG)
        >>> logger.info("Build script running")
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    log_dir = Path(log_dir) if log_dir is not None else LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    file_format = DETAILED_FORMAT if detailed else SIMPLE_FORMAT
    file_formatter = logging.Formatter(file_format, datefmt=DATE_FORMAT)

    # Console keeps the plain script-style output
    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            logging.Formatter(DETAILED_FORMAT if detailed else CONSOLE_FORMAT, datefmt=DATE_FORMAT)
        )
        logger.addHandler(console_handler)

    # File handler with daily rotation
    if log_file is None:
        log_file = f"{name}.log"

    file_handler = TimedRotatingFileHandler(
        log_dir / log_file,
        when="midnight",
        interval=1,
        backupCount=30,  # Keep 30 days of logs
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)

    # Separate error log
    error_handler = RotatingFileHandler(
        log_dir / f"{name}_errors.log",
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(error_handler)

    return logger


def get_cli_logger(verbose: bool = False, log_dir: Optional[Path] = None) -> logging.Logger:
    """Get the package logger for a CLI run."""
    level = logging.DEBUG if verbose else logging.INFO
    return setup_logger(ROOT_LOGGER, level=level, log_dir=log_dir, detailed=verbose)


def reset_logger(name: str = ROOT_LOGGER) -> None:
    """Close and drop every handler of ``name`` (used between CLI runs in one process)."""
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
