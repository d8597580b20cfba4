"""Logging setup for the league dashboard.

Everything logs through children of the ``legends`` logger
(``legends.analytics``, ``legends.brackets``, ...). Reports go to stdout, so
console logging always targets stderr.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

LOGGER_NAME = 'legends'

FILE_FORMAT = '%(asctime)s %(levelname)-8s %(name)s [%(filename)s:%(lineno)d] %(message)s'
CONSOLE_FORMAT = '%(levelname)s %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# urllib3 logs every retry at WARNING; only surface it when debugging
HTTP_LOGGERS = ('urllib3', 'requests')


def _file_handler(log_dir: Path, level: int) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    handler = logging.FileHandler(log_dir / f'{LOGGER_NAME}_{stamp}.log', encoding='utf-8')
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    log_to_file: bool = False,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Configure the ``legends`` logger for a CLI run.

    Calling it again replaces the handlers from the previous call.

    Args:
        log_dir: Directory for a timestamped log file (default: ./logs)
        level: Level for ``legends`` loggers (default: INFO)
        log_to_file: Also write a log file (default: False)
        log_to_console: Log to stderr (default: True)

    Returns:
        The ``legends`` logger

    Example:
        from legends.logging_config import setup_logging
        logger = setup_logging(level=logging.DEBUG)
        logger.info('Computing power rankings')
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_to_file:
        logger.addHandler(_file_handler(log_dir or Path('logs'), level))
    if log_to_console:
        logger.addHandler(_console_handler(level))

    http_level = logging.DEBUG if level <= logging.DEBUG else logging.ERROR
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Logger for ``legends`` or one of its ``legends.*`` children."""
    return logging.getLogger(name)
