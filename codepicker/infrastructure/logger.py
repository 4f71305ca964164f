"""
Package-wide logger for Codepicker.
"""

import logging
import sys


LOGGER_NAME = 'Codepicker'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _create_logger() -> logging.Logger:
    _logger = logging.getLogger(LOGGER_NAME)
    if not _logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        _logger.addHandler(handler)
    _logger.setLevel(logging.INFO)
    _logger.propagate = False
    return _logger


logger = _create_logger()
