"""Cycle-based condition polling that survives stale element references."""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, TypeVar

from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
)
from selenium.webdriver.support.wait import WebDriverWait

from ..errors import WaitTimeoutError
from ..models import PollPolicy

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class WaitCondition(Generic[T]):
    """A described predicate over a session.

    ``check`` returns a truthy value once satisfied and a falsy value while the
    condition does not hold yet.
    """

    description: str
    check: Callable[[Any], T]

    def __call__(self, session: Any) -> T:
        return self.check(session)

    def __str__(self) -> str:
        return self.description


class PollState(str, enum.Enum):
    POLLING = "polling"
    RECOVERING_FROM_STALENESS = "recovering_from_staleness"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"


@dataclass
class PollProgress:
    """Bookkeeping for one ``wait_for`` call."""

    policy: PollPolicy
    started: float
    state: PollState = PollState.POLLING
    cycles_used: int = 0
    stale_recoveries: int = 0
    transitions: list[PollState] = field(default_factory=list)

    @property
    def deadline(self) -> float:
        return self.started + self.policy.timeout

    def move(self, state: PollState) -> None:
        self.transitions.append(state)
        self.state = state


class WaitPoller:
    """Evaluate a condition until it holds or the whole budget is spent.

    The budget is split into ``policy.cycles`` windows. A window that times out
    or is interrupted by a stale element reference consumes one cycle; the same
    condition is then evaluated again in the next window. Every window is
    clamped to the time left, so polling never runs past the budget by more
    than one poll interval.
    """

    def __init__(
        self,
        policy: Optional[PollPolicy] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.policy = policy or PollPolicy()
        self._clock = clock
        self.last_progress: Optional[PollProgress] = None

    def wait_for(
        self,
        session: Any,
        condition: "WaitCondition[T] | Callable[[Any], T]",
        description: Optional[str] = None,
    ) -> T:
        description = description or str(getattr(condition, "description", condition))
        policy = self.policy
        progress = PollProgress(policy=policy, started=self._clock())
        self.last_progress = progress
        result: Optional[T] = None

        while progress.state not in (PollState.SUCCEEDED, PollState.TIMED_OUT):
            remaining = progress.deadline - self._clock()
            if progress.cycles_used >= policy.cycles or remaining <= 0:
                progress.move(PollState.TIMED_OUT)
                break
            window = min(policy.cycle_window, remaining)
            progress.cycles_used += 1
            try:
                result = self._poll_window(session, condition, window, description)
            except StaleElementReferenceException:
                progress.stale_recoveries += 1
                LOGGER.debug(
                    "Trying to recover from a stale element reference (cycle %s/%s)",
                    progress.cycles_used,
                    policy.cycles,
                )
                progress.move(PollState.RECOVERING_FROM_STALENESS)
            except (TimeoutException, NoSuchElementException):
                LOGGER.debug(
                    "Cycle %s/%s elapsed waiting for %s",
                    progress.cycles_used,
                    policy.cycles,
                    description,
                )
                progress.move(PollState.POLLING)
            else:
                progress.move(PollState.SUCCEEDED)

        if progress.state is PollState.SUCCEEDED:
            return result  # type: ignore[return-value]
        raise WaitTimeoutError(
            description,
            timeout=policy.timeout,
            elapsed=self._clock() - progress.started,
            cycles_used=progress.cycles_used,
            stale_recoveries=progress.stale_recoveries,
        )

    def _poll_window(
        self,
        session: Any,
        condition: Callable[[Any], T],
        window: float,
        description: str,
    ) -> T:
        wait = WebDriverWait(
            session,
            timeout=window,
            poll_frequency=min(self.policy.poll_interval, self.policy.cycle_window),
            ignored_exceptions=(NoSuchElementException,),
        )
        return wait.until(condition, message=description)


def wait_for(
    session: Any,
    condition: "WaitCondition[T] | Callable[[Any], T]",
    policy: Optional[PollPolicy] = None,
) -> T:
    """Block until ``condition`` holds for ``session`` under ``policy``."""

    return WaitPoller(policy).wait_for(session, condition)
