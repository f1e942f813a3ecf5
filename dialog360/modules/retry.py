"""
Bounded retry for network operations.

One RetryPolicy is shared by every client operation. Only errors accepted by
is_retryable drive the loop; everything else (including HTTP responses with an
error status, which never raise here) propagates on the first attempt.
"""

import logging
import random
import time
from typing import Callable, TypeVar

import httpx

from dialog360.errors import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_network_error(exc: BaseException) -> bool:
    """DNS, connect/read/write failures, timeouts and protocol errors."""
    return isinstance(exc, httpx.TransportError)


def exponential_backoff(
    base: float = 2.0,
    cap: float | None = None,
    jitter: float = 0.0,
) -> Callable[[int], float]:
    """Delay for the n-th failed attempt (1-based): base ** n, optionally capped, plus up to `jitter` seconds."""

    def backoff(attempt: int) -> float:
        delay = base ** attempt
        if cap is not None:
            delay = min(delay, cap)
        if jitter:
            delay += random.uniform(0, jitter)
        return delay

    return backoff


class RetryPolicy:
    def __init__(
        self,
        max_attempts: int = 3,
        backoff: Callable[[int], float] | None = None,
        is_retryable: Callable[[BaseException], bool] = is_network_error,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be at least 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self.backoff = backoff or exponential_backoff()
        self.is_retryable = is_retryable
        self.sleep = sleep

    def run(self, operation: Callable[[], T], description: str = "request") -> T:
        attempts = 0
        last_error: Exception | None = None

        while attempts < self.max_attempts:
            try:
                return operation()
            except Exception as e:
                if not self.is_retryable(e):
                    raise
                last_error = e
                attempts += 1
                if attempts >= self.max_attempts:
                    break
                delay = self.backoff(attempts)
                logger.warning(
                    "%s failed (attempt %d/%d, %s: %s), retrying in %.1fs",
                    description, attempts, self.max_attempts, type(e).__name__, e, delay,
                )
                self.sleep(delay)

        logger.error(
            "%s failed after %d attempts: %s", description, attempts, last_error,
        )
        raise TransportError(
            f"{description} failed after {attempts} attempts: {last_error}",
            attempts=attempts,
            last_error=last_error,
        ) from last_error
