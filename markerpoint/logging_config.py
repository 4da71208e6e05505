"""
Logging setup for the markerpoint package logger.
"""
import logging

from .config import LOG_FORMAT


def configure_logging(log_level: str = 'INFO', log_file: str = None) -> logging.Logger:
    """
    Send markerpoint's log records to the console, and to log_file if given.

    Only the 'markerpoint' logger is touched; the host application's root logger is left alone.
    Calling this again replaces the handlers added by the previous call.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    package_logger = logging.getLogger('markerpoint')
    for old_handler in list(package_logger.handlers):
        old_handler.close()
        package_logger.removeHandler(old_handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return package_logger
