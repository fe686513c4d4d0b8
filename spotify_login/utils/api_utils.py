"""
API Utilities Module

Single Responsibility: Provide retry logic and error handling
- Retry failed requests with exponential backoff
- Handle common HTTP errors
- Parse and validate API responses

Used by the accounts client for token and profile requests.
"""

import time
from functools import wraps
from typing import Callable, Any, Optional
import requests

from .logger import setup_logger


logger = setup_logger(__name__)


class APIError(Exception):
    """Raised when API requests fail after retries."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def retry_on_failure(
    max_retries: int = 3,
    backoff_factor: float = 2.0,
    initial_delay: float = 1.0,
    exceptions: tuple = (requests.exceptions.RequestException,),
    status_codes_to_retry: tuple = (429, 500, 502, 503, 504),
    sleep: Callable[[float], None] = time.sleep
) -> Callable:
    """
    Decorator: Retry function with exponential backoff on failures.

    Args:
        max_retries: Maximum number of retry attempts
        backoff_factor: Multiplier for delay between retries
        initial_delay: Initial delay in seconds
        exceptions: Exceptions to catch and retry on
        status_codes_to_retry: HTTP codes to retry on
        sleep: Sleep function (replaceable in tests)

    Usage:
        @retry_on_failure()
        def api_call():
            return requests.post(...)
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay

            for attempt in range(max_retries + 1):
                try:
                    result = func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_retries:
                        raise APIError(f"Max retries exceeded: {e}") from e
                    logger.warning(
                        f"⚠️  Network error, retrying in {delay:.1f}s "
                        f"(attempt {attempt + 1}/{max_retries})..."
                    )
                else:
                    # A retryable status on the last attempt is handed back for validation
                    if (
                        isinstance(result, requests.Response)
                        and result.status_code in status_codes_to_retry
                        and attempt < max_retries
                    ):
                        logger.warning(
                            f"⚠️  Error {result.status_code}, retrying in {delay:.1f}s "
                            f"(attempt {attempt + 1}/{max_retries})..."
                        )
                    else:
                        return result
                sleep(delay)
                delay *= backoff_factor
        return wrapper
    return decorator


def validate_response(response: requests.Response) -> dict:
    """
    Validate and parse API response.

    Args:
        response: requests.Response object

    Returns:
        Parsed JSON response

    Raises:
        APIError: If response is invalid (non-2xx or bad JSON)
    """
    # Check status code
    try:
        response.raise_for_status()
    except requests.exceptions.HTTPError as e:
        # Accounts service replies {"error": "...", "error_description": "..."},
        # the Web API replies {"error": {"status": ..., "message": "..."}}
        try:
            error_data = response.json()
        except ValueError:
            error_data = {}
        error = error_data.get('error') if isinstance(error_data, dict) else None
        if isinstance(error, dict):
            error_msg = error.get('message', str(e))
        elif error:
            error_msg = error_data.get('error_description') or error
        else:
            error_msg = str(e)
        raise APIError(f"API request failed: {error_msg}", response.status_code) from e

    # Parse JSON
    try:
        data = response.json()
    except ValueError as e:
        raise APIError(f"Invalid JSON response: {e}", response.status_code) from e

    return data
