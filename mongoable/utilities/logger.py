"""
Package logger for mongoable.

Modules log through `logger`, which forwards to the "mongoable" logger. set_logger() redirects it to an
application logger; this also affects modules which have already imported `logger`.
"""

import logging


LOGGER_NAME = "mongoable"

logger = logging.LoggerAdapter(logging.getLogger(LOGGER_NAME), {})
logger.logger.setLevel(logging.WARNING)  # Registrations and collection setup are logged at INFO


def set_logger(custom_logger: logging.Logger) -> None:
    logger.logger = custom_logger


def set_log_level(level: int) -> None:
    """ level: logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR or logging.CRITICAL """
    logger.logger.setLevel(level)
