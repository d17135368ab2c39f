"""
Bounded retry with a fixed backoff.

Selenium raises ``TimeoutException`` whenever a page or element does not
show up in time, which for the ranking sites is usually a transient
hiccup worth retrying.  Anything else (a changed page layout, a dead
driver) will not fix itself in five seconds, so the executor gives up
on the first such failure.

Every attempt is first turned into an `Attempt` whose `kind` the loop
inspects; the executor never lets an ``Exception`` escape so the caller
can move on to the next, independent source.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from selenium.common.exceptions import TimeoutException

logger = logging.getLogger(__name__)

MAX_RETRIES = 5
RETRY_DELAY_SECONDS = 5.0


class AttemptKind(Enum):
    OK = "ok"
    TRANSIENT_TIMEOUT = "transient_timeout"
    FATAL = "fatal"


@dataclass
class Attempt:
    """Outcome of a single call to an action."""

    kind: AttemptKind
    value: Any = None
    cause: Optional[BaseException] = None


def attempt(action: Callable[[], Any]) -> Attempt:
    """Call `action` once and classify the outcome."""
    try:
        return Attempt(AttemptKind.OK, value=action())
    except TimeoutException as exc:
        return Attempt(AttemptKind.TRANSIENT_TIMEOUT, cause=exc)
    except Exception as exc:  # noqa: BLE001
        return Attempt(AttemptKind.FATAL, cause=exc)


class RetryExecutor:
    """Run an action up to `max_retries` times, pausing between timeouts.

    Args:
        max_retries: Total number of attempts, including the first one.
        delay_seconds: Pause after each transient timeout except the last.
        cancel_event: Setting this event interrupts a pending pause; the
            action being retried is abandoned.
        wait: Replacement for the pause.  Receives the delay in seconds
            and returns True when the pause was interrupted.  Defaults to
            ``cancel_event.wait``.
    """

    def __init__(
        self,
        max_retries: int = MAX_RETRIES,
        delay_seconds: float = RETRY_DELAY_SECONDS,
        *,
        cancel_event: Optional[threading.Event] = None,
        wait: Optional[Callable[[float], bool]] = None,
    ) -> None:
        self.max_retries = max_retries
        self.delay_seconds = delay_seconds
        self.cancel_event = cancel_event or threading.Event()
        self._wait = wait or self.cancel_event.wait

    def run(self, action: Callable[[], Any], label: str) -> Any:
        """Run `action` and return its result, or None once it has failed."""
        for number in range(1, self.max_retries + 1):
            outcome = attempt(action)
            if outcome.kind is AttemptKind.OK:
                return outcome.value
            if outcome.kind is AttemptKind.FATAL:
                logger.error("Unexpected error during %s: %s", label, outcome.cause)
                return None
            logger.warning(
                "%s timed out, retrying (%d/%d)", label, number, self.max_retries
            )
            if number == self.max_retries:
                logger.error("All %d attempts of %s failed; giving up", self.max_retries, label)
                return None
            if self._wait(self.delay_seconds):
                logger.error("Retry delay for %s was interrupted; abandoning", label)
                self.cancel_event.clear()
                return None
        return None

    def cancel(self) -> None:
        """Interrupt any pending backoff pause.

        Only the action currently being retried is abandoned; the event is
        cleared again so later runs keep their retries.
        """
        self.cancel_event.set()
