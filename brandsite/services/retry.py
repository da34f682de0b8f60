"""Retry with exponential backoff for database calls."""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from brandsite.core.exceptions import TransientError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryOptions:
    """
    Retry policy.

    Attributes:
        max_retries: Retries after the first invocation; 0 disables retrying.
        base_delay_ms: Delay before the first retry, doubled on every retry.
        jitter: Extra random fraction of each delay, in [0, 1).
    """
    max_retries: int = 3
    base_delay_ms: int = 500
    jitter: float = 0.1

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must be >= 0")
        if not 0 <= self.jitter < 1:
            raise ValueError("jitter must be in [0, 1)")

    def delay_seconds(self, attempt: int) -> float:
        """Backoff before retry number `attempt` (0-based)."""
        delay_ms = self.base_delay_ms * (2 ** attempt)
        if self.jitter:
            delay_ms *= 1 + random.uniform(0, self.jitter)
        return delay_ms / 1000


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    options: Optional[RetryOptions] = None,
    *,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Invoke `operation`, retrying it while it raises TransientError.

    Only idempotent operations should be passed here. Any other exception
    propagates on its first occurrence. When retries run out the last
    TransientError is re-raised with ``exhausted_retries`` set.

    Args:
        operation: Zero-argument callable returning an awaitable.
        options: Retry policy; defaults to RetryOptions().
        sleep: Coroutine used to wait between attempts.

    Returns:
        Whatever the operation returns on its first successful invocation.
    """
    options = options or RetryOptions()
    attempt = 0
    while True:
        try:
            return await operation()
        except TransientError as e:
            if attempt >= options.max_retries:
                e.exhausted_retries = True
                e.attempts = attempt + 1
                logger.error(f"Giving up after {e.attempts} attempt(s): {e.detail}")
                raise
            delay = options.delay_seconds(attempt)
            logger.warning(
                f"Transient failure (attempt {attempt + 1}/{options.max_retries + 1}): "
                f"{e.detail}; retrying in {delay:.3f}s"
            )
            attempt += 1
            await sleep(delay)
