"""
Logging utilities.

The library only logs worker-pool lifecycle events, under the
``fourier_core`` logger hierarchy. Scripts call setup_logging() once to show
those records on a rich console and, optionally, keep a plain-text log file.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
PACKAGE_LOGGER = 'fourier_core'


def _drop_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    log_file: Optional[str] = None,
    level: int = logging.INFO,
    name: str = PACKAGE_LOGGER,
    console_level: int = logging.WARNING,
    console: Optional[Console] = None
) -> logging.Logger:
    """
    Route a logger to a rich console handler and an optional log file.

    Calling it again for the same name replaces the previous handlers.

    Args:
        log_file: Path to a log file, parent directories are created (None: console only)
        level: Level of the logger and of the file handler
        name: Logger name, defaults to the package logger
        console_level: Level of the console handler
        console: rich Console to write to (default: a new stderr console)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    _drop_handlers(logger)

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(console_level)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Logger under the package hierarchy; bare names are prefixed with 'fourier_core.'."""
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
