"""Logging configuration for the mdsite command line"""

import logging
import sys


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int | str = logging.INFO, module_name: str = "mdsite") -> logging.Logger:
    """Configure and return the package logger with one stderr handler.

    Calling it again replaces the handler, so the level can be changed and
    the handler always writes to the current sys.stderr.
    """
    logger = logging.getLogger(module_name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    logger.setLevel(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
