"""Exponential backoff for readiness checks.

Wraps tenacity so that only errors tagged ``retriable`` are retried. Any
other exception propagates immediately. When the wait budget runs out the
last error is wrapped in ``RetryExhaustedError``.
"""

import time
from typing import Callable, TypeVar

import structlog
from tenacity import RetryCallState, RetryError, Retrying, retry_if_exception, wait_exponential

from ..models.errors import RetryExhaustedError, is_retriable

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Growth factor between consecutive waits
BACKOFF_MULTIPLIER = 2


def expo(
    fn: Callable[[], T],
    interval: float,
    max_time: float,
    *,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> T:
    """Call ``fn`` until it succeeds, backing off exponentially.

    Args:
        fn: Check to run; raise a retriable error to ask for another attempt
        interval: First wait between attempts, in seconds
        max_time: Total wait budget, in seconds
        sleep: Sleep function (injectable for tests)
        clock: Monotonic clock (injectable for tests)

    Returns:
        Whatever ``fn`` returns on its first successful call.

    Raises:
        RetryExhaustedError: the budget ran out while ``fn`` kept failing
        Exception: any non-retriable error raised by ``fn``, unchanged
    """
    # Zero would mean no attempt budget at all
    if interval <= 0:
        interval = 1
    if max_time <= 0:
        max_time = 1

    start = clock()
    backoff = wait_exponential(multiplier=interval, exp_base=BACKOFF_MULTIPLIER)

    def remaining() -> float:
        return max_time - (clock() - start)

    def stop(retry_state: RetryCallState) -> bool:
        return remaining() <= 0

    def wait(retry_state: RetryCallState) -> float:
        return max(0.0, min(backoff(retry_state), remaining()))

    def before_sleep(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Retrying after error",
            attempt=retry_state.attempt_number,
            next_wait=round(retry_state.next_action.sleep, 3),
            error=str(error),
        )

    retrying = Retrying(
        retry=retry_if_exception(is_retriable),
        stop=stop,
        wait=wait,
        sleep=sleep,
        before_sleep=before_sleep,
    )

    try:
        return retrying(fn)
    except RetryError as e:
        last = e.last_attempt
        raise RetryExhaustedError(
            f"timed out after {max_time}s and {last.attempt_number} attempts",
            cause=last.exception(),
            attempts=last.attempt_number,
        ) from last.exception()
