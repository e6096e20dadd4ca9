"""Bounded polling and retry for slow external state transitions.

The service's state is only ever observed by re-running status commands,
so waiting for a transition means polling a probe under a RetryPolicy.
Sleeps happen between attempts only, never after the last one: N attempts
with delay D take at least (N - 1) * D seconds.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from foundryctl.core.errors import RetryExhaustedError
from foundryctl.core.time.abc import Time
from foundryctl.core.types import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


def poll_until(
    check: Callable[[], T | None],
    *,
    policy: RetryPolicy,
    time: Time,
    operation: str,
    tolerate: tuple[type[Exception], ...] = (),
    failures: list[Exception] | None = None,
) -> T | None:
    """Call check() until it returns a truthy value or attempts run out.

    Args:
        check: Probe returning the observed value, or a falsy value for
            "not yet"
        policy: Attempt budget and delay between attempts
        time: Clock used for sleeping
        operation: Human-readable description for log records
        tolerate: Exception types treated as a negative observation
        failures: If given, every tolerated error is appended to it so the
            caller can report why no value appeared

    Returns:
        The first truthy value returned by check(), or None if every
        attempt came back negative
    """
    for attempt in range(policy.attempts):
        if attempt > 0:
            time.sleep(policy.delay_before(attempt))

        try:
            value = check()
        except tolerate as e:
            if failures is not None:
                failures.append(e)
            logger.debug(
                "%s: attempt %d/%d failed: %s", operation, attempt + 1, policy.attempts, e
            )
            continue

        if value:
            return value

        logger.debug("%s: attempt %d/%d not yet", operation, attempt + 1, policy.attempts)

    return None


def retry_call(
    fn: Callable[[], T],
    *,
    policy: RetryPolicy,
    time: Time,
    operation: str,
    retry_on: tuple[type[Exception], ...],
) -> T:
    """Call fn(), retrying on the listed errors.

    Args:
        fn: Operation to attempt
        policy: Attempt budget and delay between attempts
        time: Clock used for sleeping
        operation: Human-readable description used in logs and errors
        retry_on: Exception types considered transient

    Returns:
        The value of the first successful call

    Raises:
        RetryExhaustedError: If every attempt raised a transient error,
            chained from the last one
    """
    last_error: Exception | None = None

    for attempt in range(policy.attempts):
        if attempt > 0:
            delay = policy.delay_before(attempt)
            logger.info(
                "Retrying %s after %.1fs (attempt %d/%d)",
                operation,
                delay,
                attempt + 1,
                policy.attempts,
            )
            time.sleep(delay)

        try:
            return fn()
        except retry_on as e:
            last_error = e
            logger.warning("Failed to %s: %s", operation, e)

    raise RetryExhaustedError(operation, policy.attempts, last_error) from last_error
