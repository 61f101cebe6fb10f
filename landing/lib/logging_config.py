#!/usr/bin/env python3
"""
Logging setup shared by the Flask app, the Cloud Functions entry point and
the maintenance scripts.
"""

import logging
import os
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}

# Third-party loggers that are noisy at INFO
_QUIET_LOGGERS = ('urllib3', 'google.auth', 'google.api_core')


def get_log_level_from_env() -> int:
    """
    Get log level from LOG_LEVEL environment variable.

    Returns:
        int: Logging level constant (defaults to logging.INFO)
    """
    log_level_str = os.environ.get('LOG_LEVEL', 'INFO').strip().upper()

    if log_level_str not in _LEVELS:
        # Handlers may not exist yet, so make sure this warning is visible
        logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, stream=sys.stderr)
        logging.warning(
            f"Invalid LOG_LEVEL value '{os.environ.get('LOG_LEVEL')}'. "
            f"Valid values are: {', '.join(_LEVELS)}. Defaulting to INFO."
        )
        return logging.INFO

    return _LEVELS[log_level_str]


def setup_logging(force: bool = False) -> None:
    """
    Configure the root logger once.

    Works the same under functions-framework, `flask run` and the scripts:
    one StreamHandler to stderr, level from LOG_LEVEL.

    Args:
        force: If True, drop existing handlers and reconfigure.
               Defaults to False (idempotent behavior).
    """
    root_logger = logging.getLogger()
    log_level = get_log_level_from_env()

    if root_logger.handlers and not force:
        root_logger.setLevel(log_level)
        return

    if force:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    logging.getLogger(__name__).debug(f"Logging configured with level: {logging.getLevelName(log_level)}")
