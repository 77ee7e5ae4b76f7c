"""
Utility functions for API calls with retry logic and error handling.

Provides the exception taxonomy used across the service and decorators
for robust provider interactions:
- Exponential backoff retry (sync and async)
- Error categorization (transient vs permanent)
"""
import time
import asyncio
from typing import Callable
from functools import wraps
import logging

from ..constants import (
    DEFAULT_RETRY_MAX_ATTEMPTS,
    DEFAULT_RETRY_BASE_DELAY,
    DEFAULT_RETRY_BACKOFF_FACTOR,
    DEFAULT_RETRY_MAX_DELAY,
)

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for API-related errors."""
    pass


class TransientAPIError(APIError):
    """Transient error that should be retried."""
    pass


class PermanentAPIError(APIError):
    """Permanent error that should not be retried."""
    pass


class RateLimitError(TransientAPIError):
    """Rate limit exceeded."""
    pass


class MediaAnalysisError(APIError):
    """The media-understanding provider failed to upload, process or describe a file."""
    pass


class ActivationTimeoutError(MediaAnalysisError):
    """An uploaded file did not reach the ACTIVE state within the polling budget."""
    pass


class CopyGenerationError(APIError):
    """The text-generation provider failed to produce ad copy."""
    pass


class BlobStorageError(APIError):
    """Object storage rejected an operation or a blob could not be fetched."""
    pass


class UnsupportedMediaTypeError(ValueError):
    """The submitted MIME type is neither video/* nor image/*."""
    pass


def retry_with_backoff(
    max_attempts: int = DEFAULT_RETRY_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_RETRY_BASE_DELAY,
    backoff_factor: float = DEFAULT_RETRY_BACKOFF_FACTOR,
    max_delay: float = DEFAULT_RETRY_MAX_DELAY,
    exceptions: tuple = (TransientAPIError, ConnectionError, TimeoutError)
):
    """
    Decorator for retrying functions with exponential backoff.

    Args:
        max_attempts: Maximum number of retry attempts
        base_delay: Initial delay in seconds
        backoff_factor: Multiplier for delay after each failure
        max_delay: Maximum delay between retries
        exceptions: Tuple of exceptions to catch and retry

    Example:
        @retry_with_backoff(max_attempts=3, base_delay=1.0)
        def fetch_data(url):
            response = requests.get(url)
            response.raise_for_status()
            return response.json()
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            delay = base_delay
            last_exception = None

            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)

                except exceptions as e:
                    last_exception = e

                    if attempt < max_attempts - 1:
                        logger.warning(
                            f"Attempt {attempt + 1}/{max_attempts} failed for {func.__name__}: {e}. "
                            f"Retrying in {delay:.1f}s..."
                        )
                        time.sleep(delay)
                        delay = min(delay * backoff_factor, max_delay)
                    else:
                        logger.error(
                            f"All {max_attempts} attempts failed for {func.__name__}: {e}"
                        )

                except PermanentAPIError as e:
                    # Don't retry permanent errors
                    logger.error(f"Permanent error in {func.__name__}: {e}")
                    raise

            # All retries exhausted
            raise last_exception

        return wrapper
    return decorator


def retry_with_backoff_async(
    max_attempts: int = DEFAULT_RETRY_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_RETRY_BASE_DELAY,
    backoff_factor: float = DEFAULT_RETRY_BACKOFF_FACTOR,
    max_delay: float = DEFAULT_RETRY_MAX_DELAY,
    exceptions: tuple = (TransientAPIError, ConnectionError, TimeoutError)
):
    """
    Async version of retry_with_backoff decorator.

    Args:
        max_attempts: Maximum number of retry attempts
        base_delay: Initial delay in seconds
        backoff_factor: Multiplier for delay after each failure
        max_delay: Maximum delay between retries
        exceptions: Tuple of exceptions to catch and retry
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            delay = base_delay
            last_exception = None

            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)

                except exceptions as e:
                    last_exception = e

                    if attempt < max_attempts - 1:
                        logger.warning(
                            f"Attempt {attempt + 1}/{max_attempts} failed for {func.__name__}: {e}. "
                            f"Retrying in {delay:.1f}s..."
                        )
                        await asyncio.sleep(delay)
                        delay = min(delay * backoff_factor, max_delay)
                    else:
                        logger.error(
                            f"All {max_attempts} attempts failed for {func.__name__}: {e}"
                        )

                except PermanentAPIError as e:
                    # Don't retry permanent errors
                    logger.error(f"Permanent error in {func.__name__}: {e}")
                    raise

            # All retries exhausted
            raise last_exception

        return wrapper
    return decorator
