"""Logging setup for applications embedding lanebook."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .schemas import StatsConfig

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
SIMPLE_FORMAT = '%(levelname)s: %(message)s'


def resolve_level(level: int | str | None, config: Optional[StatsConfig] = None) -> int:
    """Turn a level name or number into a number; None falls back to ``config.log_level``."""
    if level is None:
        level = (config or StatsConfig()).log_level
    if isinstance(level, str):
        number = logging.getLevelName(level.upper())
        if not isinstance(number, int):
            raise ValueError(f'Unknown log level: {level}')
        return number
    return level


def setup_logging(
    level: int | str | None = None,
    config: Optional[StatsConfig] = None,
    log_dir: Optional[Path] = None,
    log_to_file: bool = False,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Attach handlers to the ``lanebook`` logger tree.

    The library only emits records; nothing is printed until an application
    calls this. Calling it again replaces the previous handlers.

    Args:
        level: Level name or number (default: ``config.log_level``)
        config: Settings supplying the default level
        log_dir: Directory for log files (default: ./logs)
        log_to_file: Also write a timestamped file with source locations
        log_to_console: Write short messages to stdout

    Returns:
        The configured ``lanebook`` logger
    """
    level = resolve_level(level, config)
    logger = logging.getLogger('lanebook')
    logger.setLevel(level)

    for handler in logger.handlers:
        handler.close()
    logger.handlers = []

    if log_to_file:
        log_dir = log_dir or Path('logs')
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f'lanebook_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))
        logger.addHandler(console_handler)

    for handler in logger.handlers:
        handler.setLevel(level)
    return logger


def get_logger(name: str = 'lanebook') -> logging.Logger:
    """Logger under the ``lanebook`` tree, e.g. ``get_logger('lanebook.ledger')``."""
    return logging.getLogger(name)
