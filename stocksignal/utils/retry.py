"""Exponential-backoff retry for upstream calls.

A thin layer over tenacity: the wait before retry ``n`` (0-based) is
``min(base_delay * 2**n * jitter, max_delay)`` where ``jitter`` is drawn
uniformly from ``[1 - j, 1 + j]``.
"""

import logging
import random
import time
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel, Field
from tenacity import RetryCallState, Retrying, stop_after_attempt

from stocksignal.config import AnalysisConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy(BaseModel):
    """Backoff parameters for one wrapped operation."""

    max_attempts: int = Field(default=3, ge=1, description="Total attempts including the first")
    base_delay: float = Field(default=1.0, ge=0, description="Delay before the first retry (s)")
    max_delay: float = Field(default=5.0, ge=0, description="Upper bound on any single delay (s)")
    jitter: float = Field(default=0.1, ge=0, lt=1, description="Fractional jitter")

    model_config = {"frozen": True}

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_retry_attempts,
            base_delay=config.retry_delay,
            max_delay=config.max_retry_delay,
            jitter=config.retry_jitter,
        )

    def delay_for(self, retry_index: int, rng: Callable[[float, float], float] = random.uniform) -> float:
        """Compute the wait before retry ``retry_index`` (0-based)."""
        factor = rng(1 - self.jitter, 1 + self.jitter)
        return min(self.base_delay * (2 ** retry_index) * factor, self.max_delay)


def retry(
    operation: Callable[[], T],
    policy: Optional[RetryPolicy] = None,
    *,
    description: str = "operation",
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``operation`` until it succeeds or attempts run out.

    Args:
        operation: Zero-argument callable to invoke.
        policy: Backoff parameters (defaults to RetryPolicy()).
        description: Label used in log messages.
        sleep: Sleep function, replaceable in tests.

    Returns:
        Whatever ``operation`` returns.

    Raises:
        Exception: The last exception raised by ``operation``.
    """
    policy = policy or RetryPolicy()

    def _wait(state: RetryCallState) -> float:
        return policy.delay_for(state.attempt_number - 1)

    def _log_failure(state: RetryCallState) -> None:
        exc = state.outcome.exception() if state.outcome else None
        logger.warning(
            "%s failed on attempt %s/%s: %s",
            description,
            state.attempt_number,
            policy.max_attempts,
            exc,
        )

    retrying = Retrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=_wait,
        sleep=sleep,
        before_sleep=_log_failure,
        reraise=True,
    )
    return retrying(operation)
