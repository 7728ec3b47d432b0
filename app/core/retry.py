"""
Retry utilities with exponential backoff for async functions.

This module provides a decorator for re-running async operations that fail
with a known transient condition, such as a unique identifier taken by a
concurrent insert.
"""

import asyncio
import logging
from functools import wraps
from typing import Any, Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

def async_retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 10.0,
    retry_on: Tuple[Type[BaseException], ...] = (),
) -> Callable[[F], F]:
    """Decorator for async functions with exponential backoff retry logic.

    Args:
        max_attempts: Maximum number of attempts, first call included (default: 3)
        base_delay: Initial delay in seconds between retries (default: 1.0)
        max_delay: Maximum delay in seconds between retries (default: 10.0)
        retry_on: Exception types that trigger another attempt

    Example:
        @async_retry(max_attempts=2, base_delay=0, retry_on=(IdentifierConflictError,))
        async def _insert_with_next_nia(self, fields, nia_sources):
            ...

    Exceptions in retry_on are retried up to max_attempts times, with
    delay = base_delay * (2 ^ attempt) capped at max_delay. Each retry is
    logged as a warning; when all attempts fail the last error is logged and
    re-raised. Anything else propagates unchanged on the first occurrence.
    """
    def decorator(func: Callable) -> Callable:
        name = getattr(func, "__name__", repr(func))

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)

                except retry_on as e:
                    if attempt >= max_attempts - 1:
                        logger.error(
                            f"All {max_attempts} attempts failed for {name}. "
                            f"Final error: {str(e)}"
                        )
                        raise

                    delay = min(base_delay * (2 ** attempt), max_delay)
                    logger.warning(
                        f"Retry attempt {attempt + 1}/{max_attempts} for {name}. "
                        f"Error: {str(e)}. Waiting {delay:.2f}s..."
                    )
                    if delay > 0:
                        await asyncio.sleep(delay)

            raise RuntimeError(f"{name} called with max_attempts={max_attempts}")

        return wrapper
    return decorator
