"""
Logging for the donor service.

``configure_logging`` attaches handlers to the ``donorapp`` logger using the
app's ``LOG_LEVEL`` and ``LOG_FILE`` settings. Records emitted while a request
is active carry its method and path.
"""
import logging
import sys

from flask import has_request_context, request

LOGGER_NAME = 'donorapp'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(request_line)s] %(message)s'


class RequestContextFilter(logging.Filter):
    """Adds ``request_line`` ("METHOD /path", or "-" outside a request) to each record."""

    def filter(self, record):
        if has_request_context():
            record.request_line = f'{request.method} {request.path}'
        else:
            record.request_line = '-'
        return True


def configure_logging(app):
    """Configure the ``donorapp`` logger from ``app.config`` and return it.

    Handlers are added once per process; later apps only adjust the level.
    """
    level = logging.getLevelName(app.config.get('LOG_LEVEL', 'INFO'))
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if app.config.get('LOG_FILE'):
        handlers.append(logging.FileHandler(app.config['LOG_FILE']))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(RequestContextFilter())
        logger.addHandler(handler)

    return logger
