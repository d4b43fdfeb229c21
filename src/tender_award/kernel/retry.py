"""
Retry with exponential backoff for transient analyzer failures.

A flaky connection to the plan analyzer should cost a second attempt, not a
switch to simulated elements.
"""

from collections.abc import Callable
from typing import TypeVar

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from tender_award.kernel.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS: tuple[type[Exception], ...] = (ConnectionError, OSError)


def retry_on_transient_error(
    max_attempts: int = 3,
    min_wait_ms: int = 100,
    max_wait_ms: int = 1000,
    exceptions: tuple[type[Exception], ...] = TRANSIENT_ERRORS,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Retry decorator for transient errors.

    Args:
        max_attempts: Maximum number of attempts (default: 3)
        min_wait_ms: Minimum wait between attempts in milliseconds
        max_wait_ms: Maximum wait between attempts in milliseconds
        exceptions: Exception types worth another attempt

    Returns:
        Decorator; the last exception is re-raised once attempts run out

    Example:
        @retry_on_transient_error(max_attempts=2)
        def analyze(path):
            return client.analyze(path)
    """
    return retry(
        retry=retry_if_exception_type(exceptions),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(
            multiplier=1,
            min=min_wait_ms / 1000.0,
            max=max_wait_ms / 1000.0,
        ),
        before_sleep=lambda retry_state: logger.warning(
            "Transient error detected, retrying",
            attempt=retry_state.attempt_number,
            exception=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        ),
        reraise=True,
    )
