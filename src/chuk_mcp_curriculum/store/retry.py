"""
Bounded retry with exponential backoff for store writes.

Only TransientStoreError is retried; anything else propagates on the
first failure.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from chuk_mcp_curriculum.errors import TransientStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry logic."""

    max_attempts: int = 3
    initial_delay: float = 0.05
    max_delay: float = 1.0
    exponential_base: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ValueError("Retry delays must be >= 0")

    def delays(self) -> list[float]:
        """Sleep before each retry (one fewer than max_attempts)."""
        result = []
        delay = self.initial_delay
        for _ in range(self.max_attempts - 1):
            result.append(min(delay, self.max_delay))
            delay *= self.exponential_base
        return result


NO_RETRY = RetryConfig(max_attempts=1)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig = RetryConfig(),
    description: str = "store operation",
) -> T:
    """
    Run an async operation, retrying transient store failures.

    Args:
        operation: Zero-argument coroutine factory (called once per attempt)
        config: Retry configuration
        description: Used in log messages

    Returns:
        The operation's result

    Raises:
        TransientStoreError: When every attempt failed transiently
        Exception: Any non-transient failure, unchanged
    """
    delays = config.delays()
    for attempt in range(config.max_attempts):
        try:
            return await operation()
        except TransientStoreError as e:
            if attempt >= len(delays):
                logger.warning(f"{description} failed after {config.max_attempts} attempts: {e}")
                raise
            logger.warning(
                f"{description} failed (attempt {attempt + 1}/{config.max_attempts}), "
                f"retrying in {delays[attempt]:.2f}s: {e}"
            )
            await asyncio.sleep(delays[attempt])

    raise AssertionError("unreachable")
