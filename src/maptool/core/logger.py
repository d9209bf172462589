"""Logging configuration and setup."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from maptool.core.config import Settings, settings as default_settings


def setup_logging(log_dir: Path, config: Optional[Settings] = None) -> Path:
    """Configures Loguru logging for console and file output.

    Removes the default handler, adds a colorized console handler on stderr
    and a rotated/compressed log file in ``log_dir``. The file handler is
    enqueued so logging never blocks on disk.

    Returns:
        Path of the log file.
    """
    config = config or default_settings
    logger.remove()  # Remove default handler

    # Console Handler (Stderr)
    logger.add(
        sys.stderr,
        level=config.LOG_LEVEL,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )

    # File Handler (Rotated & Compressed)
    log_file = Path(log_dir) / config.LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(log_file),
        rotation=config.LOG_ROTATION,
        retention=config.LOG_RETENTION,
        compression="zip",
        level=config.LOG_LEVEL,
        enqueue=True,
        backtrace=True,
        diagnose=False,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    )

    return log_file
