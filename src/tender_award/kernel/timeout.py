"""
Bounded calls to slow collaborators.

The plan analyzer is the only place the pipeline waits on something it does
not control. Calls run on a helper thread and are abandoned after a deadline,
which works inside worker threads where SIGALRM-based timeouts cannot.
"""

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, TypeVar

from tender_award.kernel.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class TimeoutError(Exception):
    """Raised when an operation exceeds its timeout."""

    pass


def call_with_timeout(
    func: Callable[..., T],
    *args: Any,
    seconds: float,
    operation_name: str = "operation",
    **kwargs: Any,
) -> T:
    """
    Run func(*args, **kwargs) and give up after `seconds`.

    An abandoned call keeps running on its helper thread until it returns
    on its own; its result is discarded.

    Args:
        func: Callable to run
        seconds: Deadline in seconds
        operation_name: Name used in logs and the error message

    Raises:
        TimeoutError: If the call does not finish in time
        Exception: Whatever func raised, unchanged

    Example:
        result = call_with_timeout(analyzer.analyze, path, seconds=30,
                                   operation_name="analyze_plan")
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=operation_name)
    future = executor.submit(func, *args, **kwargs)
    try:
        return future.result(timeout=seconds)
    except FutureTimeoutError:
        future.cancel()
        logger.error(
            "Operation exceeded timeout",
            operation=operation_name,
            timeout_seconds=seconds,
        )
        raise TimeoutError(
            f"{operation_name} exceeded timeout of {seconds} seconds"
        ) from None
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def with_timeout(
    seconds: float,
    operation_name: str = "operation",
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator form of call_with_timeout.

    Example:
        @with_timeout(30, "analyze_plan")
        def analyze(path):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        def wrapper(*args: Any, **kwargs: Any) -> T:
            return call_with_timeout(
                func, *args, seconds=seconds, operation_name=operation_name, **kwargs
            )

        return wrapper

    return decorator
