"""
Retry Policy

Bounded exponential-backoff retry for YouTube API calls.
"""

import http.client
import logging
import socket
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

import httplib2
from googleapiclient.errors import HttpError

from .config import MAX_RETRIES, RETRY_BASE_DELAY, RETRY_MULTIPLIER

logger = logging.getLogger(__name__)

T = TypeVar('T')

RATE_LIMIT_STATUSES = (403, 429)


def http_status(error: BaseException) -> Optional[int]:
    """HTTP status of an HttpError, or None for other exceptions."""
    if isinstance(error, HttpError):
        try:
            return int(error.resp.status)
        except (AttributeError, TypeError, ValueError):
            return None
    return None


def is_rate_limited(error: BaseException) -> bool:
    """Rate-limit and access-denied responses (quota exceeded comes back as 403)."""
    return http_status(error) in RATE_LIMIT_STATUSES


def is_retryable_error(error: BaseException) -> bool:
    """
    Default retry condition.

    HTTP errors, transport failures, timeouts and response parse failures are
    retried. Anything else is a bug and propagates immediately.
    """
    return isinstance(error, (
        HttpError, httplib2.HttpLib2Error, http.client.HTTPException, socket.timeout, OSError, ValueError,
    ))


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff parameters.

    The delay before retry n (1-based) is base_delay * multiplier ** (n - 1).
    """

    max_retries: int = MAX_RETRIES
    base_delay: float = RETRY_BASE_DELAY
    multiplier: float = RETRY_MULTIPLIER
    retryable: Callable[[BaseException], bool] = is_retryable_error

    def delay_for(self, retry_number: int) -> float:
        return self.base_delay * (self.multiplier ** (retry_number - 1))


class RetryExhausted(Exception):
    """Raised when every attempt allowed by the policy has failed."""

    def __init__(self, attempts: int, last_error: BaseException):
        super().__init__(f"failed after {attempts} attempts")
        self.attempts = attempts
        self.last_error = last_error


def call_with_retry(
    fn: Callable[[], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None],
    describe: Callable[[BaseException], str] = str,
) -> T:
    """
    Call fn, retrying retryable failures with exponential backoff.

    Args:
        fn: Zero-argument callable performing one attempt
        policy: RetryPolicy to apply
        sleep: Function used to wait between attempts (seconds)
        describe: Turns an exception into a loggable message

    Returns:
        The first successful result of fn

    Raises:
        RetryExhausted: If all attempts fail with retryable errors
    """
    retry_number = 0
    while True:
        try:
            return fn()
        except Exception as e:
            if not policy.retryable(e):
                raise
            retry_number += 1
            if retry_number > policy.max_retries:
                raise RetryExhausted(retry_number, e) from e

            wait = policy.delay_for(retry_number)
            if is_rate_limited(e):
                logger.warning(f"YouTube API rate limited ({describe(e)}) - retrying after {wait:g}s (attempt {retry_number})")
            else:
                logger.warning(f"YouTube API request failed ({describe(e)}) - retrying after {wait:g}s (attempt {retry_number})")
            sleep(wait)
