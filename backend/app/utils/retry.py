"""
Bounded retry with exponential backoff for flaky upstream calls.

Every attempt re-runs the whole operation, so only wrap calls that are safe to
repeat (AI text generation is; media uploads are not).
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration. Delays are in seconds."""
    max_retries: int = 3
    initial_delay: float = 1.0
    max_delay: float = 10.0
    backoff_multiplier: float = 2.0

    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")

    def delay_for(self, attempt: int) -> float:
        """Delay before the retry that follows 0-based ``attempt``."""
        return min(self.initial_delay * (self.backoff_multiplier ** attempt), self.max_delay)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    *,
    label: str = "operation",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run ``operation`` until it succeeds or the policy's attempts are used up.

    Args:
        operation: Zero-argument callable returning an awaitable
        policy: Retry configuration (defaults to 3 attempts, 1s doubling, 10s cap)
        label: Name used in log lines
        sleep: Awaitable sleep function (injectable for tests)

    Returns:
        The operation's result from the first successful attempt.

    Raises:
        The exception from the final attempt, unchanged.
    """
    policy = policy or RetryPolicy()

    for attempt in range(policy.max_retries):
        try:
            return await operation()
        except Exception as e:
            if attempt == policy.max_retries - 1:
                raise

            delay = policy.delay_for(attempt)
            logger.warning(
                "%s: attempt %d/%d failed. Retrying in %.2fs: %s",
                label,
                attempt + 1,
                policy.max_retries,
                delay,
                str(e) or type(e).__name__,
            )
            await sleep(delay)

    # Unreachable: the loop either returns or re-raises on the last attempt
    raise RuntimeError(f"{label}: retry loop exited without a result")
