"""Retry decorators for handling connection errors."""

import logging
import time
from functools import wraps
from typing import Any, Callable, Tuple, Type

import requests

logger = logging.getLogger(__name__)

CONNECTION_ERRORS: Tuple[Type[BaseException], ...] = (
    requests.exceptions.ConnectionError,
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.Timeout,
    ConnectionResetError,
)


def retry_on_connection_error(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    retry_on: Tuple[Type[BaseException], ...] = CONNECTION_ERRORS,
) -> Callable:
    """Decorator that retries a function on connection errors with exponential backoff.

    Args:
        max_retries: Maximum number of attempts, including the first one
        initial_delay: Delay before the first retry in seconds, doubled after each
        retry_on: Exception types that trigger a retry; anything else propagates
            immediately

    Returns:
        Decorated function that retries on connection errors. The last
        exception is re-raised once attempts are exhausted.

    Example:
        @retry_on_connection_error(max_retries=3, initial_delay=1.0)
        def fetch_data(url):
            return requests.get(url)
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay
            for attempt in range(1, max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except retry_on as e:
                    if attempt == max_retries:
                        logger.error(f"Failed after {max_retries} attempts: {e}")
                        raise
                    logger.warning(
                        f"Connection error on attempt {attempt}/{max_retries}: {e}. "
                        f"Retrying in {delay}s..."
                    )
                    time.sleep(delay)
                    delay *= 2

        return wrapper

    return decorator
