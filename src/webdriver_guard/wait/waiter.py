"""Session-bound waiting helpers."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional, TypeVar, Union

from selenium.webdriver.remote.webelement import WebElement

from ..browser.base import BrowserSession
from ..errors import WaitTimeoutError
from ..models import PollPolicy
from . import conditions
from .conditions import Locator
from .poller import WaitCondition, WaitPoller

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class Waiter:
    """Bind a session and a poll policy together.

    ``until`` fails the test when the condition never holds. ``if_present``
    is the best-effort variant: it returns ``None`` instead of raising, for
    call sites where the condition is optional (cookie banners, one-off
    dialogs).
    """

    def __init__(self, session: BrowserSession, policy: Optional[PollPolicy] = None) -> None:
        self.session = session
        self.policy = policy or PollPolicy()

    def _poller(self, timeout: Optional[float]) -> WaitPoller:
        if timeout is None:
            return WaitPoller(self.policy)
        return WaitPoller(self.policy.model_copy(update={"timeout": timeout}))

    def until(
        self,
        condition: Union[WaitCondition[T], Callable[[Any], T]],
        *,
        timeout: Optional[float] = None,
    ) -> T:
        return self._poller(timeout).wait_for(self.session, condition)

    def if_present(
        self,
        condition: Union[WaitCondition[T], Callable[[Any], T]],
        *,
        timeout: Optional[float] = None,
    ) -> Optional[T]:
        try:
            return self.until(condition, timeout=timeout)
        except WaitTimeoutError as exc:
            LOGGER.info("Skipping optional step: %s", exc)
            return None

    def pause(self, seconds: float) -> None:
        LOGGER.debug("Pausing test execution for %s seconds", seconds)
        time.sleep(seconds)
        LOGGER.debug("Resuming test playback.")

    def element_present(self, locator: Locator, *, timeout: Optional[float] = None) -> WebElement:
        return self.until(conditions.element_present(locator), timeout=timeout)

    def element_visible(self, locator: Locator, *, timeout: Optional[float] = None) -> WebElement:
        return self.until(conditions.element_visible(locator), timeout=timeout)

    def element_clickable(self, locator: Locator, *, timeout: Optional[float] = None) -> WebElement:
        return self.until(conditions.element_clickable(locator), timeout=timeout)

    def element_absent(self, locator: Locator, *, timeout: Optional[float] = None) -> None:
        self.until(conditions.element_absent(locator), timeout=timeout)

    def element_invisible(self, locator: Locator, *, timeout: Optional[float] = None) -> None:
        self.until(conditions.element_invisible(locator), timeout=timeout)

    def text_present(self, locator: Locator, text: str, *, timeout: Optional[float] = None) -> None:
        self.until(conditions.text_present(locator, text), timeout=timeout)

    def page_loaded(self, *, timeout: Optional[float] = None) -> None:
        self.until(conditions.page_loaded(), timeout=timeout)

    def frame(self, frame: Union[str, Locator], *, timeout: Optional[float] = None) -> None:
        """Wait for ``frame`` and switch into it."""

        self.until(conditions.frame_available(frame), timeout=timeout)

    def switch_to_default_frame(self) -> None:
        self.session.switch_to.default_content()
