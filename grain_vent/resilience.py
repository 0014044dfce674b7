"""
Retry support for Grain Vent weather fetches.

A weather request can fail for reasons that go away on their own (timeouts,
rate limits, 5xx) or for reasons that will not (bad API key, malformed
payload). The first kind is retried with exponential backoff; the second
gives up immediately.

Usage:
    @with_retry(provider_name="Caiyun")
    async def fetch(...):
        ...
"""

import asyncio
import functools
import json
import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ErrorType(Enum):
    """Failure categories used in retry logs."""
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    API_ERROR = "api_error"
    PARSE_ERROR = "parse_error"
    UNKNOWN = "unknown"


@dataclass
class RetryConfig:
    """Retry behavior. Defaults give 3 attempts with 1-5 second waits."""
    max_retries: int = 2
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 5.0
    exponential_base: float = 2.0
    jitter: bool = True

    # Client errors: retrying will not help
    non_retryable_status_codes: tuple = (400, 401, 403, 404, 422)

    retryable_status_codes: tuple = (408, 429, 500, 502, 503, 504)


DEFAULT_RETRY_CONFIG = RetryConfig()


def categorize_error(exception: Exception) -> Tuple[ErrorType, str]:
    """
    Classify an exception raised by a weather fetch.

    Returns:
        Tuple of (ErrorType, short message)
    """
    error_msg = str(exception)[:200]

    if isinstance(exception, httpx.TimeoutException):
        return (ErrorType.TIMEOUT, f"Timeout: {error_msg}")

    if isinstance(exception, httpx.HTTPStatusError):
        status = exception.response.status_code
        if status == 429:
            return (ErrorType.RATE_LIMIT, "HTTP 429 Too Many Requests")
        return (ErrorType.API_ERROR, f"HTTP {status}: {error_msg}")

    if isinstance(exception, httpx.RequestError):
        return (ErrorType.API_ERROR, f"Request error: {error_msg}")

    if isinstance(exception, (json.JSONDecodeError, KeyError, ValueError, TypeError)):
        return (ErrorType.PARSE_ERROR, f"Parse error: {error_msg}")

    return (ErrorType.UNKNOWN, error_msg)


def calculate_backoff_delay(attempt: int, config: RetryConfig) -> float:
    """
    Delay before retry number attempt + 1.

    Args:
        attempt: Zero-based retry index
        config: Retry configuration

    Returns:
        Delay in seconds, capped at max_delay_seconds plus up to 25% jitter
    """
    delay = min(
        config.base_delay_seconds * (config.exponential_base ** attempt),
        config.max_delay_seconds
    )

    if config.jitter:
        delay += delay * 0.25 * random.random()

    return delay


def is_retryable_error(exception: Exception, config: RetryConfig) -> bool:
    """True if the failure is worth another attempt."""
    if isinstance(exception, httpx.HTTPStatusError):
        status = exception.response.status_code
        if status in config.non_retryable_status_codes:
            return False
        return status in config.retryable_status_codes or status >= 500

    if isinstance(exception, (httpx.TimeoutException, httpx.RequestError)):
        return True

    # Same payload would come back again
    if isinstance(exception, (KeyError, ValueError, TypeError)):
        return False

    return True


def with_retry(
    config: Optional[RetryConfig] = None,
    provider_name: str = "unknown"
) -> Callable:
    """
    Decorator adding retry with exponential backoff to an async function.

    The wrapped function returns None once every attempt has failed or a
    non-retryable error is hit; the last error is logged.

    Args:
        config: Retry configuration (DEFAULT_RETRY_CONFIG if None)
        provider_name: Label for log messages
    """
    if config is None:
        config = DEFAULT_RETRY_CONFIG

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> Optional[Any]:
            last_exception: Optional[Exception] = None
            start_time = time.time()
            attempts = 0

            for attempt in range(config.max_retries + 1):
                if attempt > 0:
                    delay = calculate_backoff_delay(attempt - 1, config)
                    logger.info(
                        f"[{provider_name}] Retry {attempt}/{config.max_retries} "
                        f"after {delay:.1f}s delay"
                    )
                    await asyncio.sleep(delay)

                attempts += 1
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    last_exception = e
                    error_type, error_msg = categorize_error(e)
                    logger.warning(
                        f"[{provider_name}] Attempt {attempt + 1} failed: "
                        f"{error_type.value} - {error_msg}"
                    )
                    if not is_retryable_error(e, config):
                        logger.error(f"[{provider_name}] Error not retryable, giving up")
                        break
                    continue

                if attempt > 0:
                    logger.info(
                        f"[{provider_name}] Succeeded on attempt {attempt + 1} "
                        f"({time.time() - start_time:.2f}s total)"
                    )
                return result

            error_type = categorize_error(last_exception)[0] if last_exception else ErrorType.UNKNOWN
            logger.error(
                f"[{provider_name}] Gave up after {attempts} attempt(s) "
                f"({time.time() - start_time:.2f}s total). Last error: {error_type.value}"
            )
            return None

        return async_wrapper

    return decorator
