from __future__ import annotations

from typing import Any

import pytest
from selenium.webdriver import Remote
from selenium.webdriver.remote.command import Command

from conftest import make_session
from webdriver_guard.browser.webdriver_session import WebDriverSession
from webdriver_guard.console.drain import drain_console
from webdriver_guard.console.monitor import (
    ConsoleMonitor,
    ConsoleMonitoredSession,
    attach,
    monitor_of,
    unwrap,
)
from webdriver_guard.errors import ConsoleLogError
from webdriver_guard.models import BrowserFamily, ConsoleThreshold, ExecutionMode, SessionDescriptor


def test_warnings_never_fail_a_severe_threshold() -> None:
    raw, driver = make_session()
    session = attach(raw, ConsoleThreshold(level="SEVERE"))
    driver.log("WARNING", "deprecated API used")

    session.get("https://app.test/")
    driver.log("WARNING", "another warning")
    assert session.title == "Title of https://app.test/"


def test_severe_entry_fails_the_next_checked_operation() -> None:
    raw, driver = make_session()
    session = attach(raw, ConsoleThreshold(level="SEVERE"))
    session.get("https://app.test/")

    driver.log("SEVERE", "Uncaught TypeError: x is undefined")
    with pytest.raises(ConsoleLogError, match="Uncaught TypeError") as excinfo:
        session.current_url

    assert excinfo.value.entry.message == "Uncaught TypeError: x is undefined"
    # The before-checkpoint fails, so the driver was never asked for the URL.
    assert driver.count("current_url") == 0


def test_violation_raised_after_delegation() -> None:
    raw, driver = make_session()
    session = attach(raw, ConsoleThreshold(level="WARNING"))
    original_get = driver.get

    def get_with_error(url: str) -> None:
        original_get(url)
        driver.log("SEVERE", "failed to load resource")

    driver.get = get_with_error  # type: ignore[method-assign]

    with pytest.raises(ConsoleLogError):
        session.get("https://app.test/broken")
    assert driver.url == "https://app.test/broken"


def test_blacklisted_messages_never_fail() -> None:
    raw, driver = make_session()
    session = attach(raw, ConsoleThreshold(level="INFO"))
    driver.log("SEVERE", "https://pbs.twimg.com/media/x.jpg - Failed to load resource")

    session.get("https://app.test/")
    assert session.window_handles == ["main"]


def test_first_offending_entry_is_reported() -> None:
    raw, driver = make_session()
    session = attach(raw, ConsoleThreshold(level="WARNING"))
    driver.log("INFO", "boot")
    driver.log("WARNING", "first problem")
    driver.log("SEVERE", "second problem")

    with pytest.raises(ConsoleLogError, match="first problem"):
        session.find_elements("css selector", ".row")


def test_off_threshold_and_non_chrome_sessions_are_not_wrapped() -> None:
    raw, _ = make_session()
    assert attach(raw, ConsoleThreshold(level="OFF")) is raw

    firefox, _ = make_session(BrowserFamily.FIREFOX)
    assert attach(firefox, ConsoleThreshold(level="SEVERE")) is firefox


def test_return_values_pass_through_unchanged() -> None:
    raw, driver = make_session()
    driver.script_results["return 41 + 1"] = 42
    session = attach(raw, ConsoleThreshold(level="SEVERE"))

    assert isinstance(session, ConsoleMonitoredSession)
    assert session.execute_script("return 41 + 1") == 42
    assert session.current_window_handle == "main"
    assert session.page_source == "<html></html>"
    assert unwrap(session) is raw
    assert monitor_of(session) is session.monitor
    assert monitor_of(raw) is None


def test_checked_operations_read_the_log_before_and_after() -> None:
    raw, driver = make_session()
    session = attach(raw, ConsoleThreshold(level="SEVERE"))

    session.get("https://app.test/")
    assert driver.count("get_log") == 2

    session.set_window_size(100, 100)
    session.delete_all_cookies()
    assert driver.count("get_log") == 2


def test_quit_is_only_checked_before() -> None:
    raw, driver = make_session()
    session = attach(raw, ConsoleThreshold(level="SEVERE"))

    session.quit()

    assert driver.count("get_log") == 1
    assert driver.count("quit") == 1
    assert not session.alive


def test_input_actions_are_checked() -> None:
    raw, driver = make_session()
    session = attach(raw, ConsoleThreshold(level="SEVERE"))
    chain = session.actions()

    session.perform(chain)
    session.reset_input_state()

    assert driver.count("get_log") == 4
    assert driver.count("execute") >= 2


def test_custom_checked_operation_set() -> None:
    raw, driver = make_session()
    monitor = ConsoleMonitor(ConsoleThreshold(level="SEVERE"), checked_operations={"get"})
    session = monitor.attach(raw)
    driver.log("SEVERE", "ignored until navigation")

    assert session.title == "Blank"
    with pytest.raises(ConsoleLogError):
        session.get("https://app.test/")


def test_release_is_never_checked() -> None:
    raw, driver = make_session()
    session = attach(raw, ConsoleThreshold(level="SEVERE"))
    driver.log("SEVERE", "left over")

    session.release()
    session.release()

    assert driver.count("get_log") == 0
    assert driver.count("quit") == 1


def _grid_chrome(pending: list[dict[str, Any]]) -> tuple[WebDriverSession, list[tuple[str, Any]]]:
    """A real ``Remote`` driver, which has no ``get_log``, with its wire calls stubbed."""

    commands: list[tuple[str, Any]] = []

    def execute(command: str, params: Any = None) -> dict[str, Any]:
        commands.append((command, params))
        if command == Command.GET_LOG:
            entries = list(pending)
            pending.clear()
            return {"value": entries}
        if command == Command.GET_TITLE:
            return {"value": "Grid page"}
        return {"value": None}

    driver = Remote.__new__(Remote)
    driver.execute = execute  # type: ignore[method-assign]
    descriptor = SessionDescriptor(
        mode=ExecutionMode.REMOTE,
        browser=BrowserFamily.CHROME,
        remote_endpoint="http://grid:4444",
    )
    return WebDriverSession(driver, descriptor), commands


def test_remote_chrome_session_reads_console_over_the_wire() -> None:
    pending = [{"level": "WARNING", "message": "slow image", "timestamp": 1700000000000}]
    raw, commands = _grid_chrome(pending)
    session = attach(raw, ConsoleThreshold(level="SEVERE"))

    assert session.title == "Grid page"
    assert (Command.GET_LOG, {"type": "browser"}) in commands

    pending.append({"level": "SEVERE", "message": "Uncaught Error: boom", "timestamp": 1700000000000})
    with pytest.raises(ConsoleLogError, match="Uncaught Error: boom"):
        session.get("https://app.test/")
    assert not any(command == Command.GET for command, _ in commands)


def test_remote_chrome_session_is_drained_at_teardown() -> None:
    pending = [{"level": "INFO", "message": "app booted", "timestamp": 1700000000000}]
    raw, _ = _grid_chrome(pending)

    entries = drain_console(raw)

    assert [entry.message for entry in entries] == ["app booted"]
