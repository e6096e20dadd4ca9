"""Tests for bounded polling and retry."""

from collections.abc import Callable
from typing import Any

import pytest

from foundryctl.core.errors import CommandFailedError, RetryExhaustedError
from foundryctl.core.retry import poll_until, retry_call
from foundryctl.core.types import RetryPolicy
from tests.fakes.time import FakeTime


def _sequence(*values: object) -> Callable[[], Any]:
    items = list(values)

    def next_value() -> object:
        value = items.pop(0)
        if isinstance(value, Exception):
            raise value
        return value

    return next_value


def test_poll_until_returns_first_truthy_value_without_sleeping() -> None:
    time = FakeTime()

    result = poll_until(
        _sequence("ready"), policy=RetryPolicy(3, 2.0), time=time, operation="check status"
    )

    assert result == "ready"
    assert time.sleep_calls == []


def test_poll_until_sleeps_between_attempts_only() -> None:
    time = FakeTime()

    result = poll_until(
        _sequence(None, False, 42), policy=RetryPolicy(5, 2.0), time=time, operation="check status"
    )

    assert result == 42
    assert time.sleep_calls == [2.0, 2.0]


def test_poll_until_exhaustion_returns_none() -> None:
    time = FakeTime()

    result = poll_until(
        _sequence(None, None, None), policy=RetryPolicy(3, 5.0), time=time, operation="check status"
    )

    assert result is None
    assert time.sleep_calls == [5.0, 5.0]


def test_poll_until_tolerates_listed_errors() -> None:
    time = FakeTime()
    failure = CommandFailedError(["foundry", "service", "list"], 1, "busy")

    result = poll_until(
        _sequence(failure, "id:1"),
        policy=RetryPolicy(3, 1.0),
        time=time,
        operation="check status",
        tolerate=(CommandFailedError,),
    )

    assert result == "id:1"


def test_poll_until_collects_tolerated_errors() -> None:
    first = CommandFailedError(["foundry", "service", "list"], 1, "busy")
    second = CommandFailedError(["foundry", "service", "list"], 1, "crashed")
    failures: list[Exception] = []

    result = poll_until(
        _sequence(first, None, second),
        policy=RetryPolicy(3, 1.0),
        time=FakeTime(),
        operation="read model id",
        tolerate=(CommandFailedError,),
        failures=failures,
    )

    assert result is None
    assert failures == [first, second]


def test_poll_until_propagates_other_errors() -> None:
    with pytest.raises(ValueError):
        poll_until(
            _sequence(ValueError("bad")),
            policy=RetryPolicy(3, 1.0),
            time=FakeTime(),
            operation="check status",
            tolerate=(CommandFailedError,),
        )


def test_poll_until_applies_backoff() -> None:
    time = FakeTime()

    poll_until(
        _sequence(None, None, None, None),
        policy=RetryPolicy(4, 1.0, backoff_factor=2.0),
        time=time,
        operation="check status",
    )

    assert time.sleep_calls == [1.0, 2.0, 4.0]


def test_retry_call_returns_after_transient_failures() -> None:
    time = FakeTime()
    failure = CommandFailedError(["foundry", "model", "load", "x"], 1, "busy")

    result = retry_call(
        _sequence(failure, failure, "ok"),
        policy=RetryPolicy(3, 0.5),
        time=time,
        operation="load model",
        retry_on=(CommandFailedError,),
    )

    assert result == "ok"
    assert time.sleep_calls == [0.5, 0.5]


def test_retry_call_exhaustion_chains_last_error() -> None:
    first = CommandFailedError(["foundry"], 1, "first")
    last = CommandFailedError(["foundry"], 1, "last")

    with pytest.raises(RetryExhaustedError) as exc_info:
        retry_call(
            _sequence(first, last),
            policy=RetryPolicy(2, 1.0),
            time=FakeTime(),
            operation="load model",
            retry_on=(CommandFailedError,),
        )

    assert exc_info.value.last_error is last
    assert exc_info.value.__cause__ is last
    assert "after 2 attempts: 'foundry' exited with status 1: last" in str(exc_info.value)


def test_retry_call_does_not_retry_unlisted_errors() -> None:
    time = FakeTime()

    with pytest.raises(KeyError):
        retry_call(
            _sequence(KeyError("x"), "ok"),
            policy=RetryPolicy(3, 1.0),
            time=time,
            operation="load model",
            retry_on=(CommandFailedError,),
        )
    assert time.sleep_calls == []
