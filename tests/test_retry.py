"""Tests for the bounded retry executor."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock

from selenium.common.exceptions import TimeoutException

from rankflow.schedule.retry import (
    MAX_RETRIES,
    RETRY_DELAY_SECONDS,
    AttemptKind,
    RetryExecutor,
    attempt,
)


def _recording_executor(interrupt: bool = False):
    delays = []

    def wait(seconds: float) -> bool:
        delays.append(seconds)
        return interrupt

    return RetryExecutor(wait=wait), delays


def test_attempt_classifies_outcomes() -> None:
    assert attempt(lambda: 42).kind is AttemptKind.OK
    assert attempt(lambda: 42).value == 42

    def timeout():
        raise TimeoutException("slow")

    def broken():
        raise ValueError("layout changed")

    assert attempt(timeout).kind is AttemptKind.TRANSIENT_TIMEOUT
    outcome = attempt(broken)
    assert outcome.kind is AttemptKind.FATAL
    assert isinstance(outcome.cause, ValueError)


def test_always_timing_out_exhausts_retries() -> None:
    executor, delays = _recording_executor()
    action = MagicMock(side_effect=TimeoutException("slow"))

    assert executor.run(action, "Naver data collection") is None
    assert action.call_count == MAX_RETRIES == 5
    assert delays == [RETRY_DELAY_SECONDS] * 4


def test_fatal_error_aborts_without_delay() -> None:
    executor, delays = _recording_executor()
    action = MagicMock(side_effect=RuntimeError("driver crashed"))

    assert executor.run(action, "Zum data collection") is None
    assert action.call_count == 1
    assert delays == []


def test_recovers_after_transient_timeouts() -> None:
    executor, delays = _recording_executor()
    action = MagicMock(side_effect=[TimeoutException("a"), TimeoutException("b"), "snapshot"])

    assert executor.run(action, "Nate data collection") == "snapshot"
    assert action.call_count == 3
    assert len(delays) == 2


def test_fatal_after_timeout_stops_retrying() -> None:
    executor, delays = _recording_executor()
    action = MagicMock(side_effect=[TimeoutException("a"), KeyError("rank")])

    assert executor.run(action, "Google data collection") is None
    assert action.call_count == 2
    assert len(delays) == 1


def test_interrupted_wait_abandons_action() -> None:
    executor, delays = _recording_executor(interrupt=True)
    action = MagicMock(side_effect=TimeoutException("slow"))

    assert executor.run(action, "Namuwiki data collection") is None
    assert action.call_count == 1
    assert delays == [RETRY_DELAY_SECONDS]


def test_cancel_event_interrupts_default_wait() -> None:
    event = threading.Event()
    executor = RetryExecutor(max_retries=3, delay_seconds=60, cancel_event=event)
    executor.cancel()
    action = MagicMock(side_effect=TimeoutException("slow"))

    assert executor.run(action, "Naver data collection") is None
    assert action.call_count == 1


def test_success_returns_none_result_as_is() -> None:
    executor, delays = _recording_executor()
    action = MagicMock(return_value=None)

    assert executor.run(action, "noop") is None
    assert action.call_count == 1
    assert delays == []


def test_cancel_only_abandons_the_current_action() -> None:
    executor = RetryExecutor(max_retries=3, delay_seconds=0)
    executor.cancel()
    first = MagicMock(side_effect=TimeoutException("slow"))
    assert executor.run(first, "Naver data collection") is None
    assert first.call_count == 1

    second = MagicMock(side_effect=[TimeoutException("slow"), "snapshot"])
    assert executor.run(second, "Nate data collection") == "snapshot"
    assert second.call_count == 2
    assert not executor.cancel_event.is_set()
