"""Delay policies used between batches and between attempts."""

import asyncio
import logging
import random
from dataclasses import dataclass

logger = logging.getLogger(__name__)

CONSTANT = "constant"
EXPONENTIAL = "exponential"


def calculate_backoff_delay(
    attempt: int,
    base_delay: float,
    max_delay: float,
    exponential_base: float = 2.0,
    jitter: float = 0.0,
) -> float:
    """Calculate an exponential backoff delay.

    Args:
        attempt: Zero-based step number
        base_delay: Delay for the first step in seconds
        max_delay: Upper bound for the delay in seconds
        exponential_base: Growth factor per step
        jitter: Relative random spread, e.g. 0.25 for +-25%

    Returns:
        Delay in seconds, never negative
    """
    delay = min(base_delay * (exponential_base ** max(attempt, 0)), max_delay)
    if jitter:
        delay += delay * random.uniform(-jitter, jitter)
    return max(delay, 0.0)


@dataclass(frozen=True)
class BackoffPolicy:
    """Configurable delay schedule.

    Attributes:
        base_delay: Delay in seconds (constant) or for the first step (exponential)
        strategy: "constant" or "exponential"
        max_delay: Upper bound for exponential delays
        exponential_base: Growth factor for exponential delays
        jitter: Relative random spread applied to every delay
    """

    base_delay: float = 0.0
    strategy: str = CONSTANT
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: float = 0.0

    def __post_init__(self) -> None:
        if self.strategy not in (CONSTANT, EXPONENTIAL):
            raise ValueError(
                f"Backoff strategy must be '{CONSTANT}' or '{EXPONENTIAL}', "
                f"got '{self.strategy}'"
            )
        if self.base_delay < 0:
            raise ValueError("base_delay must not be negative")

    @classmethod
    def none(cls) -> "BackoffPolicy":
        """A policy that never waits."""
        return cls(base_delay=0.0)

    def delay_for(self, step: int) -> float:
        """Delay in seconds before the given zero-based step."""
        if self.strategy == EXPONENTIAL:
            return calculate_backoff_delay(
                attempt=step,
                base_delay=self.base_delay,
                max_delay=self.max_delay,
                exponential_base=self.exponential_base,
                jitter=self.jitter,
            )
        return calculate_backoff_delay(
            attempt=0,
            base_delay=self.base_delay,
            max_delay=max(self.base_delay, self.max_delay),
            exponential_base=1.0,
            jitter=self.jitter,
        )

    async def wait(self, step: int) -> float:
        """Sleep for the delay of ``step`` and return the delay used."""
        delay = self.delay_for(step)
        if delay > 0:
            logger.info(f"Waiting {delay:.1f} seconds...")
            await asyncio.sleep(delay)
        return delay
