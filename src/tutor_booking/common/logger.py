'''
Application logger for the booking engine.
'''
import logging
import sys

from .config import settings

LOGGER_NAME = 'TB-backend'
LOG_FORMAT = '%(asctime)s - %(module)s - %(levelname)s\n - %(message)s'


def setup_logger(name: str = LOGGER_NAME, level: str | int | None = None) -> logging.Logger:
    """
    Builds the named stdout logger once. Calling it again only updates the level,
    so importing modules never stack duplicate handlers.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level or settings.LOG_LEVEL)
    logger.propagate = False

    if not logger.handlers:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(stdout_handler)

    return logger

log = setup_logger()
