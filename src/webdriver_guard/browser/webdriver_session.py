"""Browser session backed by a selenium WebDriver."""

from __future__ import annotations

import logging
from typing import Any, Optional

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.remote.command import Command
from selenium.webdriver.remote.switch_to import SwitchTo
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from urllib3.exceptions import HTTPError

from ..models import LogEntry, SessionDescriptor
from .base import BrowserSession
from .display import VirtualDisplay

LOGGER = logging.getLogger(__name__)

# Raised by selenium when the browser process or grid node is already gone.
DEAD_SESSION_ERRORS = (WebDriverException, HTTPError, OSError)


class WebDriverSession(BrowserSession):
    """Adapter exposing a selenium ``WebDriver`` as a ``BrowserSession``."""

    def __init__(
        self,
        driver: WebDriver,
        descriptor: SessionDescriptor,
        *,
        display: Optional[VirtualDisplay] = None,
    ) -> None:
        self._driver = driver
        self._descriptor = descriptor
        self._display = display
        self._alive = True

    def __repr__(self) -> str:
        session_id = getattr(self._driver, "session_id", None)
        return f"<WebDriverSession {self._descriptor.browser.value} {session_id}>"

    @property
    def driver(self) -> WebDriver:
        return self._driver

    @property
    def descriptor(self) -> SessionDescriptor:
        return self._descriptor

    @property
    def display(self) -> Optional[VirtualDisplay]:
        return self._display

    @property
    def alive(self) -> bool:
        return self._alive

    def get(self, url: str) -> None:
        self._driver.get(url)

    @property
    def current_url(self) -> str:
        return self._driver.current_url

    @property
    def title(self) -> str:
        return self._driver.title

    @property
    def page_source(self) -> str:
        return self._driver.page_source

    def find_element(self, by: str, value: str | None = None) -> WebElement:
        return self._driver.find_element(by, value)

    def find_elements(self, by: str, value: str | None = None) -> list[WebElement]:
        return self._driver.find_elements(by, value)

    def execute_script(self, script: str, *args: Any) -> Any:
        return self._driver.execute_script(script, *args)

    def execute_async_script(self, script: str, *args: Any) -> Any:
        return self._driver.execute_async_script(script, *args)

    def actions(self) -> ActionChains:
        return ActionChains(self._driver)

    def perform(self, chain: ActionChains) -> None:
        chain.perform()

    def reset_input_state(self) -> None:
        ActionChains(self._driver).reset_actions()

    @property
    def window_handles(self) -> list[str]:
        return self._driver.window_handles

    @property
    def current_window_handle(self) -> str:
        return self._driver.current_window_handle

    @property
    def switch_to(self) -> SwitchTo:
        return self._driver.switch_to

    def get_window_size(self) -> dict[str, int]:
        return self._driver.get_window_size()

    def set_window_size(self, width: int, height: int) -> None:
        self._driver.set_window_size(width, height)

    def set_window_position(self, x: int, y: int) -> None:
        self._driver.set_window_position(x, y)

    def maximize_window(self) -> None:
        self._driver.maximize_window()

    def delete_all_cookies(self) -> None:
        self._driver.delete_all_cookies()

    def get_log(self, log_type: str = "browser") -> list[LogEntry]:
        # Only the chromium drivers define get_log; a grid session issues the command itself.
        fetch = getattr(self._driver, "get_log", None)
        if fetch is not None:
            raw_entries = fetch(log_type)
        else:
            raw_entries = self._driver.execute(Command.GET_LOG, {"type": log_type})["value"]
        return [LogEntry.from_webdriver(raw) for raw in raw_entries or []]

    def close(self) -> None:
        self._driver.close()

    def quit(self) -> None:
        try:
            self._driver.quit()
        finally:
            self._alive = False
            self._stop_display()

    def release(self) -> None:
        if not self._alive:
            LOGGER.debug("Session %r already released", self)
            return
        LOGGER.debug("Releasing session %r", self)
        self._alive = False
        try:
            self._driver.quit()
        except DEAD_SESSION_ERRORS:
            LOGGER.debug("Browser for %r was already gone", self, exc_info=True)
        finally:
            self._stop_display()

    def _stop_display(self) -> None:
        if self._display is not None:
            self._display.stop()
