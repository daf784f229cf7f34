"""Opt-in retries with exponential backoff for the HTTP clients.

Retries are disabled unless the caller passes a ``RetryConfig`` with
``max_retries > 0``.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from .error import HttpError, ServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 0  # 0 = disabled
    base_delay_ms: int = 100
    max_delay_ms: int = 10000

    @classmethod
    def default(cls) -> "RetryConfig":
        """Create default config (retry disabled)."""
        return cls()

    @classmethod
    def with_retries(cls, max_retries: int) -> "RetryConfig":
        """Create config with specified retry count."""
        return cls(max_retries=max_retries)


def is_retryable(error: Exception) -> bool:
    """Rate limiting, server-side failures and network errors are retryable."""
    if isinstance(error, ServiceError):
        return error.status is not None and (error.status == 429 or error.status >= 500)
    return isinstance(error, (HttpError, asyncio.TimeoutError))


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """Delay in seconds before retry ``attempt``, with 75-100% jitter."""
    delay_ms = min(config.base_delay_ms * (2**attempt), config.max_delay_ms)
    return int(delay_ms * random.uniform(0.75, 1.0)) / 1000.0


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig,
    description: str = "request",
) -> T:
    """Await ``operation()``, retrying retryable failures per ``config``."""
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as e:
            if not is_retryable(e) or attempt >= config.max_retries:
                raise
            delay = calculate_delay(attempt, config)
            logger.debug(
                "%s failed (%s), retry %d/%d in %.2fs",
                description,
                e,
                attempt + 1,
                config.max_retries,
                delay,
            )
            attempt += 1
            await asyncio.sleep(delay)
