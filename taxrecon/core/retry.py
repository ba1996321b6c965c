"""Fixed-attempt, fixed-delay retry wrapper for flaky external calls."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from tenacity import RetryCallState, RetryError, Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from taxrecon.core.exceptions import MaxRetriesExceededError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Retry an operation up to ``max_tries`` times, sleeping ``delay`` seconds in between.

    ``call`` returns ``(result, duration_in_seconds)`` so callers can report how long
    the operation took including the failed attempts. After the last failed attempt a
    ``MaxRetriesExceededError`` is raised, chained to the final underlying error.
    Errors outside ``retry_on`` propagate on the first attempt.
    """

    max_tries: int = 2
    delay: float = 1.0
    retry_on: tuple[type[BaseException], ...] = (Exception,)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False, compare=False)
    monotonic: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.max_tries < 1:
            raise ValueError("max_tries must be at least 1")
        if self.delay < 0:
            raise ValueError("delay cannot be negative")

    def call(
        self,
        operation: str,
        func: Callable[[], T],
        context: str | None = None,
    ) -> tuple[T, float]:
        def log_retry(state: RetryCallState) -> None:
            logger.info(
                "Failed to perform '%s', attempt %s/%s: %s: %s",
                operation, state.attempt_number, self.max_tries, context, state.outcome.exception(),
            )

        retrying = Retrying(
            stop=stop_after_attempt(self.max_tries),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception_type(self.retry_on),
            sleep=self.sleep,
            before_sleep=log_retry,
        )
        start = self.monotonic()
        try:
            result = retrying(func)
        except RetryError as err:
            duration = self.monotonic() - start
            exc = err.last_attempt.exception()
            logger.error(
                "Failed to perform '%s' after %s attempts in %.2fs: %s: %s",
                operation, self.max_tries, duration, context, exc,
            )
            raise MaxRetriesExceededError(operation, self.max_tries, str(exc)) from exc
        duration = self.monotonic() - start
        logger.info("Successfully completed '%s' in %.2fs", operation, duration)
        return result, duration
