"""Retry decorator with exponential backoff for flaky provider requests."""

import logging
import time
from functools import wraps
from typing import Tuple, Type

logger = logging.getLogger(__name__)


def retry_with_backoff(
    max_retries: int = 3,
    backoff_factor: float = 2,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    max_delay: float = 30,
):
    """
    Decorator for retrying a call with exponential backoff.

    The delay before retry ``n`` (0-based) is ``backoff_factor ** n``
    seconds, capped at ``max_delay``. Exceptions not listed in
    ``exceptions`` propagate immediately; the last listed one is re-raised
    once the retries are used up.

    Example:
        @retry_with_backoff(max_retries=2, exceptions=(requests.Timeout,))
        def fetch_page(url):
            ...
    """

    def decorator(func):
        name = getattr(func, "__name__", repr(func))

        @wraps(func)
        def wrapper(*args, **kwargs):
            attempts = max(0, max_retries) + 1

            for attempt in range(attempts):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == attempts - 1:
                        logger.error(f"{name} failed after {attempts} attempt(s): {e}")
                        raise
                    delay = min(backoff_factor**attempt, max_delay)
                    logger.warning(
                        f"{name} failed (attempt {attempt + 1}/{attempts}): {e}. Retrying in {delay}s..."
                    )
                    time.sleep(delay)

        return wrapper

    return decorator
