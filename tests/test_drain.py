import logging

import pytest
from selenium.common.exceptions import WebDriverException

from conftest import make_session
from webdriver_guard.console.drain import drain_console


def test_drain_logs_entries_without_noisy_scripts(caplog: pytest.LogCaptureFixture) -> None:
    session, driver = make_session()
    driver.log("SEVERE", "https://app.test/scripts/src/common/eventTracking.js 404")
    driver.log("WARNING", "slow network detected")

    with caplog.at_level(logging.DEBUG, logger="webdriver_guard.console"):
        entries = drain_console(session, name="test_checkout")

    assert [entry.message for entry in entries] == ["slow network detected"]
    assert "slow network detected" in caplog.text
    assert "eventTracking" not in caplog.text
    assert driver.browser_log == []


def test_drain_swallows_log_failures(caplog: pytest.LogCaptureFixture) -> None:
    session, driver = make_session()
    driver.log_error = WebDriverException("log type 'browser' not found")

    assert drain_console(session) == []
    assert "No console logs were available." in caplog.text


def test_drain_with_custom_ignore_list() -> None:
    session, driver = make_session()
    driver.log("INFO", "analytics ping")
    driver.log("INFO", "app started")

    entries = drain_console(session, ignored=["analytics"])

    assert [entry.message for entry in entries] == ["app started"]
