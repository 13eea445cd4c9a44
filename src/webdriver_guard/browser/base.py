"""Browser session abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.remote.switch_to import SwitchTo
from selenium.webdriver.remote.webelement import WebElement

from ..models import BrowserFamily, LogEntry, SessionDescriptor


class BrowserSession(ABC):
    """Operation set of a live browser session.

    Method and property names follow selenium's ``WebDriver`` so that the
    callables in ``selenium.webdriver.support.expected_conditions`` accept a
    session wherever they expect a driver.
    """

    @property
    @abstractmethod
    def descriptor(self) -> SessionDescriptor:
        """Descriptor the session was provisioned from."""

    @property
    def family(self) -> BrowserFamily:
        return self.descriptor.browser

    @property
    @abstractmethod
    def alive(self) -> bool:
        """False once the session was quit or released."""

    # Navigation and page state

    @abstractmethod
    def get(self, url: str) -> None:
        """Navigate to ``url`` and block until the page has loaded."""

    @property
    @abstractmethod
    def current_url(self) -> str:
        """URL of the current page."""

    @property
    @abstractmethod
    def title(self) -> str:
        """Title of the current page."""

    @property
    @abstractmethod
    def page_source(self) -> str:
        """Source of the current page."""

    # Element lookup

    @abstractmethod
    def find_element(self, by: str, value: str | None = None) -> WebElement:
        """Return the first element matching the locator."""

    @abstractmethod
    def find_elements(self, by: str, value: str | None = None) -> list[WebElement]:
        """Return all elements matching the locator."""

    # Scripts and input

    @abstractmethod
    def execute_script(self, script: str, *args: Any) -> Any:
        """Run synchronous JavaScript in the current frame."""

    @abstractmethod
    def execute_async_script(self, script: str, *args: Any) -> Any:
        """Run asynchronous JavaScript in the current frame."""

    @abstractmethod
    def actions(self) -> ActionChains:
        """Return an action chain bound to this session for use with ``perform``."""

    @abstractmethod
    def perform(self, chain: ActionChains) -> None:
        """Send a prepared input-action sequence to the browser."""

    @abstractmethod
    def reset_input_state(self) -> None:
        """Release every pressed key and button."""

    # Windows

    @property
    @abstractmethod
    def window_handles(self) -> list[str]:
        """Handles of all open windows."""

    @property
    @abstractmethod
    def current_window_handle(self) -> str:
        """Handle of the focused window."""

    @property
    @abstractmethod
    def switch_to(self) -> SwitchTo:
        """Frame, window and alert switching."""

    @abstractmethod
    def get_window_size(self) -> dict[str, int]:
        """Return the outer window size."""

    @abstractmethod
    def set_window_size(self, width: int, height: int) -> None:
        """Resize the outer window."""

    @abstractmethod
    def set_window_position(self, x: int, y: int) -> None:
        """Move the outer window."""

    @abstractmethod
    def maximize_window(self) -> None:
        """Maximise the outer window."""

    @abstractmethod
    def delete_all_cookies(self) -> None:
        """Remove every cookie visible to the current page."""

    # Logs

    @abstractmethod
    def get_log(self, log_type: str = "browser") -> list[LogEntry]:
        """Fetch and clear the accumulated entries of a log channel."""

    # Lifecycle

    @abstractmethod
    def close(self) -> None:
        """Close the current window."""

    @abstractmethod
    def quit(self) -> None:
        """End the session and shut the browser down."""

    @abstractmethod
    def release(self) -> None:
        """End the session if it is still alive. Never raises and may be repeated."""
