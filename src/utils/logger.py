"""
Logging for the live emotion overlay.

One configured parent logger ("live_emotions") carries the handlers; module
loggers are its children and only need get_logger().
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog

from .config import Config

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}


def _console_handler(level: int, colored: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if colored:
        handler.setFormatter(colorlog.ColoredFormatter(
            "%(log_color)s" + CONSOLE_FORMAT, datefmt="%H:%M:%S", log_colors=LOG_COLORS
        ))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding='utf-8')
    handler.setLevel(logging.DEBUG)  # file keeps everything
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logger(name: str = "live_emotions", level: Optional[str] = None) -> logging.Logger:
    """
    Configure and return a logger from the `logging` config section.

    Args:
        name: Logger name (children of "live_emotions" inherit its handlers)
        level: Level override, e.g. "DEBUG" from --debug

    Usage:
        logger = setup_logger("live_emotions", level="DEBUG")
        logger.info("Starting capture...")
    """
    config = Config()
    level_name = (level or config.get("logging.level", "INFO")).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    # Re-running setup must not stack handlers
    logger.handlers.clear()

    if config.get("logging.console", True):
        logger.addHandler(_console_handler(numeric_level, config.get("logging.colored", True)))

    log_file = config.get("logging.file")
    if log_file:
        logger.addHandler(_file_handler(config.project_root / log_file))

    return logger


def get_logger(name: str = "live_emotions") -> logging.Logger:
    """Get a logger without touching its handlers"""
    return logging.getLogger(name)
