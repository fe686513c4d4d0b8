"""
Utilities package for spotify-login.
Provides common utilities for logging and API helpers.
"""
from .logger import setup_logger, set_log_level, ColoredFormatter, mask_secret
from .api_utils import APIError, retry_on_failure, validate_response

__all__ = [
    'setup_logger',
    'set_log_level',
    'ColoredFormatter',
    'mask_secret',
    'APIError',
    'retry_on_failure',
    'validate_response'
]
