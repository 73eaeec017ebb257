"""
Logging Configuration
Sets up the ``implicitplot`` logger for command line runs.

Console output goes to stderr so stdout only carries the written path.
The optional log file gets timestamps; the console does not.
"""
import logging
import sys
from typing import Optional, Union

CONSOLE_FORMAT = '%(levelname)s %(name)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _handler(handler: logging.Handler, level: int, fmt: str,
             datefmt: Optional[str] = None) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def setup_logging(level: Union[int, str] = logging.INFO,
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'implicitplot' namespace.

    Args:
        level: Logging level, as a number or a name ('DEBUG', 'info', ...)
        log_file: Optional path to save logs to a file (overwritten).
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"unknown log level {level!r}")

    logger = logging.getLogger("implicitplot")
    logger.setLevel(level)
    # repeated CLI runs in one process must not stack handlers
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    logger.addHandler(_handler(logging.StreamHandler(sys.stderr), level, CONSOLE_FORMAT))
    if log_file:
        logger.addHandler(_handler(logging.FileHandler(log_file, mode='w', encoding='utf-8'),
                                   level, FILE_FORMAT, '%H:%M:%S'))

    logger.debug("Logging initialized.")
    return logger
