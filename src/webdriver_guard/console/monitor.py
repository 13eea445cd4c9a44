"""Console-log policy enforcement around browser session operations."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, TypeVar

from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.remote.switch_to import SwitchTo
from selenium.webdriver.remote.webelement import WebElement

from ..browser.base import BrowserSession
from ..errors import ConsoleLogError
from ..models import ConsoleThreshold, LogEntry, SessionDescriptor

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

BROWSER_LOG = "browser"

DEFAULT_CHECKED_OPERATIONS = frozenset(
    {
        "get",
        "current_url",
        "title",
        "find_element",
        "find_elements",
        "page_source",
        "execute_script",
        "execute_async_script",
        "perform",
        "reset_input_state",
        "window_handles",
        "current_window_handle",
        "close",
        "quit",
    }
)

# The session is gone after these, so only the "before" checkpoint applies.
_TERMINAL_OPERATIONS = frozenset({"quit"})


class ConsoleMonitor:
    """Wrap sessions so checked operations enforce a console threshold."""

    def __init__(
        self,
        threshold: ConsoleThreshold,
        checked_operations: Iterable[str] = DEFAULT_CHECKED_OPERATIONS,
    ) -> None:
        self.threshold = threshold
        self.checked_operations = frozenset(checked_operations)

    def applies_to(self, session: BrowserSession) -> bool:
        return self.threshold.enabled and session.family.exposes_console_log

    def attach(self, session: BrowserSession) -> BrowserSession:
        if not self.applies_to(session):
            LOGGER.debug(
                "Console monitoring disabled for %s (level %s)",
                session.family.value,
                self.threshold.level.name,
            )
            return session
        LOGGER.info("Console log level: %s", self.threshold.level.name)
        return ConsoleMonitoredSession(session, self)

    def violations(self, entries: Iterable[LogEntry]) -> list[LogEntry]:
        return [entry for entry in entries if self.threshold.is_violation(entry)]

    def check(self, session: BrowserSession) -> None:
        """Raise ``ConsoleLogError`` for the first violating console entry."""

        offending = self.violations(session.get_log(BROWSER_LOG))
        if offending:
            raise ConsoleLogError(offending[0])


def attach(session: BrowserSession, threshold: ConsoleThreshold) -> BrowserSession:
    """Return ``session`` instrumented with a console check for ``threshold``."""

    return ConsoleMonitor(threshold).attach(session)


class ConsoleMonitoredSession(BrowserSession):
    """Session proxy that checks the console before and after each checked call."""

    def __init__(self, inner: BrowserSession, monitor: ConsoleMonitor) -> None:
        self._inner = inner
        self._monitor = monitor

    def __repr__(self) -> str:
        return f"<ConsoleMonitoredSession {self._inner!r}>"

    @property
    def inner(self) -> BrowserSession:
        return self._inner

    @property
    def monitor(self) -> ConsoleMonitor:
        return self._monitor

    def _guard(self, operation: str, call: Callable[..., T], *args: Any) -> T:
        if operation not in self._monitor.checked_operations:
            return call(*args)
        self._monitor.check(self._inner)
        result = call(*args)
        if operation not in _TERMINAL_OPERATIONS:
            self._monitor.check(self._inner)
        return result

    @property
    def descriptor(self) -> SessionDescriptor:
        return self._inner.descriptor

    @property
    def alive(self) -> bool:
        return self._inner.alive

    def get(self, url: str) -> None:
        self._guard("get", self._inner.get, url)

    @property
    def current_url(self) -> str:
        return self._guard("current_url", lambda: self._inner.current_url)

    @property
    def title(self) -> str:
        return self._guard("title", lambda: self._inner.title)

    @property
    def page_source(self) -> str:
        return self._guard("page_source", lambda: self._inner.page_source)

    def find_element(self, by: str, value: str | None = None) -> WebElement:
        return self._guard("find_element", self._inner.find_element, by, value)

    def find_elements(self, by: str, value: str | None = None) -> list[WebElement]:
        return self._guard("find_elements", self._inner.find_elements, by, value)

    def execute_script(self, script: str, *args: Any) -> Any:
        return self._guard("execute_script", self._inner.execute_script, script, *args)

    def execute_async_script(self, script: str, *args: Any) -> Any:
        return self._guard(
            "execute_async_script", self._inner.execute_async_script, script, *args
        )

    def actions(self) -> ActionChains:
        return self._inner.actions()

    def perform(self, chain: ActionChains) -> None:
        self._guard("perform", self._inner.perform, chain)

    def reset_input_state(self) -> None:
        self._guard("reset_input_state", self._inner.reset_input_state)

    @property
    def window_handles(self) -> list[str]:
        return self._guard("window_handles", lambda: self._inner.window_handles)

    @property
    def current_window_handle(self) -> str:
        return self._guard("current_window_handle", lambda: self._inner.current_window_handle)

    @property
    def switch_to(self) -> SwitchTo:
        return self._inner.switch_to

    def get_window_size(self) -> dict[str, int]:
        return self._inner.get_window_size()

    def set_window_size(self, width: int, height: int) -> None:
        self._inner.set_window_size(width, height)

    def set_window_position(self, x: int, y: int) -> None:
        self._inner.set_window_position(x, y)

    def maximize_window(self) -> None:
        self._inner.maximize_window()

    def delete_all_cookies(self) -> None:
        self._inner.delete_all_cookies()

    def get_log(self, log_type: str = BROWSER_LOG) -> list[LogEntry]:
        return self._inner.get_log(log_type)

    def close(self) -> None:
        self._guard("close", self._inner.close)

    def quit(self) -> None:
        self._guard("quit", self._inner.quit)

    def release(self) -> None:
        self._inner.release()


def unwrap(session: BrowserSession) -> BrowserSession:
    """Return the innermost session below any monitoring proxies."""

    while isinstance(session, ConsoleMonitoredSession):
        session = session.inner
    return session


def monitor_of(session: BrowserSession) -> Optional[ConsoleMonitor]:
    return session.monitor if isinstance(session, ConsoleMonitoredSession) else None
