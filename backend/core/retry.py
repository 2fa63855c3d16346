"""
Retry support for calls against external model services.
"""
import logging
import time
from functools import wraps

import httpx

logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES = {429, 500, 502, 503, 504}


def retry_on_transient_error(max_retries: int = 2, base_delay: float = 0.5):
    """
    Decorator to retry operations on transient errors.

    Detects network timeouts, dropped connections and rate limiting.
    Non-transient errors are raised on the first attempt.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if _is_transient_error(e) and attempt < max_retries:
                        delay = base_delay * (2 ** attempt)
                        logger.warning(f"Transient error, retrying in {delay}s: {e}")
                        time.sleep(delay)
                        continue
                    raise

        return wrapper
    return decorator


def _is_transient_error(error: Exception) -> bool:
    """Determine if error is transient (retryable)."""
    if isinstance(error, (httpx.TimeoutException, httpx.NetworkError)):
        return True
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code in TRANSIENT_STATUS_CODES

    error_str = str(error).lower()
    transient_indicators = [
        "timeout",
        "connection reset",
        "temporary failure",
        "service unavailable",
    ]
    return any(indicator in error_str for indicator in transient_indicators)
