"""Logging for the bot and its scripts, built on loguru."""

import sys
from typing import Optional, TextIO

from loguru import logger

from trainbot.utils.config import Settings, get_settings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> <level>{level: <7}</level> "
    "<cyan>{name}</cyan> {message}"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} {level: <7} {name}:{line} {message}"


def setup_logger(settings: Optional[Settings] = None, console: TextIO = sys.stderr):
    """Replace loguru's default sink with the configured ones.

    Console output always goes to ``console``. A rotating file sink is
    added only when ``settings.log_file_path`` is set; its directory is
    created by loguru.
    """
    settings = settings or get_settings()

    logger.remove()
    logger.add(console, format=CONSOLE_FORMAT, level=settings.log_level, colorize=None)

    if settings.log_file_path:
        logger.add(
            settings.log_file_path,
            format=FILE_FORMAT,
            level=settings.log_level,
            rotation=f"{settings.log_max_size_mb} MB",
            retention=settings.log_backup_count,
        )

    logger.debug(f"Logging at {settings.log_level} to {settings.log_file_path or 'console only'}")
    return logger


def get_logger():
    return logger
