from __future__ import annotations

from typing import Any, Optional

import pytest
from selenium.common.exceptions import (
    NoAlertPresentException,
    NoSuchElementException,
    NoSuchFrameException,
)

from webdriver_guard.browser.provisioner import SessionProvisioner
from webdriver_guard.browser.webdriver_session import WebDriverSession
from webdriver_guard.models import BrowserFamily, ExecutionMode, SessionDescriptor

pytest_plugins = ["webdriver_guard.pytest_plugin"]


class FakeElement:
    def __init__(self, name: str, *, displayed: bool = True, text: str = "") -> None:
        self.name = name
        self.displayed = displayed
        self.text = text
        self.children: dict[tuple[str, str], "FakeElement"] = {}

    def is_displayed(self) -> bool:
        return self.displayed

    def is_enabled(self) -> bool:
        return True

    def find_element(self, by: str, value: Optional[str] = None) -> "FakeElement":
        try:
            return self.children[(by, value)]
        except KeyError:
            raise NoSuchElementException(f"{by}={value}") from None


class FakeSwitchTo:
    def __init__(self, driver: "FakeDriver") -> None:
        self._driver = driver

    @property
    def alert(self) -> str:
        if self._driver.alert_text is None:
            raise NoAlertPresentException()
        return self._driver.alert_text

    def frame(self, reference: Any) -> None:
        name = getattr(reference, "name", reference)
        if name not in self._driver.frames:
            raise NoSuchFrameException(str(name))
        self._driver.calls.append(("switch_to.frame", name))
        self._driver.current_frame = name

    def default_content(self) -> None:
        self._driver.calls.append(("switch_to.default_content",))
        self._driver.current_frame = None


class FakeDriver:
    """Stand-in for a selenium WebDriver that records every call."""

    def __init__(self, **capabilities: Any) -> None:
        self.capabilities = capabilities
        self.session_id = "fake-session"
        self.calls: list[tuple[Any, ...]] = []
        self.browser_log: list[dict[str, Any]] = []
        self.elements: dict[tuple[str, str], FakeElement] = {}
        self.script_results: dict[str, Any] = {"return document.readyState": "complete"}
        self.window_size = {"width": 800, "height": 600}
        self.url = "about:blank"
        self.page_title = "Blank"
        self.quit_error: Optional[BaseException] = None
        self.log_error: Optional[BaseException] = None
        self.file_detector: Any = None
        self.frames: set[str] = set()
        self.current_frame: Optional[str] = None
        self.alert_text: Optional[str] = None
        self.switch_to = FakeSwitchTo(self)

    def get(self, url: str) -> None:
        self.calls.append(("get", url))
        self.url = url
        self.page_title = f"Title of {url}"

    @property
    def current_url(self) -> str:
        self.calls.append(("current_url",))
        return self.url

    @property
    def title(self) -> str:
        self.calls.append(("title",))
        return self.page_title

    @property
    def page_source(self) -> str:
        return "<html></html>"

    def find_element(self, by: str, value: Optional[str] = None) -> FakeElement:
        self.calls.append(("find_element", by, value))
        try:
            return self.elements[(by, value)]
        except KeyError:
            raise NoSuchElementException(f"{by}={value}") from None

    def find_elements(self, by: str, value: Optional[str] = None) -> list[FakeElement]:
        self.calls.append(("find_elements", by, value))
        element = self.elements.get((by, value))
        return [element] if element else []

    def execute_script(self, script: str, *args: Any) -> Any:
        self.calls.append(("execute_script", script))
        return self.script_results.get(script)

    def execute_async_script(self, script: str, *args: Any) -> Any:
        self.calls.append(("execute_async_script", script))
        return None

    def execute(self, command: str, params: Any = None) -> dict[str, Any]:
        self.calls.append(("execute", command))
        return {"value": None}

    @property
    def window_handles(self) -> list[str]:
        return ["main"]

    @property
    def current_window_handle(self) -> str:
        return "main"

    def get_window_size(self) -> dict[str, int]:
        return dict(self.window_size)

    def set_window_size(self, width: int, height: int) -> None:
        self.calls.append(("set_window_size", width, height))
        self.window_size = {"width": width, "height": height}

    def set_window_position(self, x: int, y: int) -> None:
        self.calls.append(("set_window_position", x, y))

    def maximize_window(self) -> None:
        self.calls.append(("maximize_window",))

    def delete_all_cookies(self) -> None:
        self.calls.append(("delete_all_cookies",))

    def get_log(self, log_type: str) -> list[dict[str, Any]]:
        self.calls.append(("get_log", log_type))
        if self.log_error is not None:
            raise self.log_error
        entries, self.browser_log = self.browser_log, []
        return entries

    def close(self) -> None:
        self.calls.append(("close",))

    def quit(self) -> None:
        self.calls.append(("quit",))
        if self.quit_error is not None:
            raise self.quit_error

    def log(self, level: str, message: str) -> None:
        self.browser_log.append(
            {"level": level, "message": message, "timestamp": 1700000000000, "source": "console-api"}
        )

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


class FakeDriverFactory:
    """Callable used in place of ``webdriver.Chrome`` / ``webdriver.Remote``."""

    def __init__(
        self,
        error: Optional[BaseException] = None,
        script_results: Optional[dict[str, Any]] = None,
    ) -> None:
        self.error = error
        self.script_results = script_results or {}
        self.calls: list[dict[str, Any]] = []
        self.drivers: list[FakeDriver] = []

    def __call__(self, **kwargs: Any) -> FakeDriver:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        driver = FakeDriver()
        driver.script_results.update(self.script_results)
        self.drivers.append(driver)
        return driver


def make_session(
    browser: BrowserFamily = BrowserFamily.CHROME,
    driver: Optional[FakeDriver] = None,
) -> tuple[WebDriverSession, FakeDriver]:
    driver = driver or FakeDriver()
    descriptor = SessionDescriptor(mode=ExecutionMode.LOCAL, browser=browser, headless=True)
    return WebDriverSession(driver, descriptor), driver  # type: ignore[arg-type]


def make_provisioner(**kwargs: Any) -> tuple[SessionProvisioner, FakeDriverFactory, FakeDriverFactory]:
    local = FakeDriverFactory()
    remote = FakeDriverFactory()
    provisioner = SessionProvisioner(
        local_drivers={family: local for family in BrowserFamily},
        remote_driver=remote,
        platform="linux",
        **kwargs,
    )
    return provisioner, local, remote


@pytest.fixture
def fake_session() -> tuple[WebDriverSession, FakeDriver]:
    return make_session()
