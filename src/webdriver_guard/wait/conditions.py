"""Reusable wait conditions.

Every condition locates its element again on each evaluation, so a condition
interrupted by a stale reference is re-evaluated against the fresh element.
"""

from __future__ import annotations

import json
from typing import Any, Union

from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC

from .poller import WaitCondition

Locator = tuple[str, str]


def _describe(locator: Locator) -> str:
    by, value = locator
    return f"element by {by}={value!r}"


def element_present(locator: Locator) -> WaitCondition[WebElement]:
    return WaitCondition(f"{_describe(locator)} present", EC.presence_of_element_located(locator))


def element_visible(locator: Locator) -> WaitCondition[WebElement]:
    return WaitCondition(f"{_describe(locator)} visible", EC.visibility_of_element_located(locator))


def element_clickable(locator: Locator) -> WaitCondition[WebElement]:
    return WaitCondition(f"{_describe(locator)} clickable", EC.element_to_be_clickable(locator))


def element_absent(locator: Locator) -> WaitCondition[bool]:
    def _check(session: Any) -> bool:
        return not session.find_elements(*locator)

    return WaitCondition(f"{_describe(locator)} absent", _check)


def element_invisible(locator: Locator) -> WaitCondition[Any]:
    return WaitCondition(
        f"{_describe(locator)} invisible", EC.invisibility_of_element_located(locator)
    )


def text_present(locator: Locator, text: str) -> WaitCondition[bool]:
    return WaitCondition(
        f"text {text!r} in {_describe(locator)}",
        EC.text_to_be_present_in_element(locator, text),
    )


def text_absent(locator: Locator, text: str) -> WaitCondition[bool]:
    """Holds once the element is gone or no longer contains ``text``."""

    def _check(session: Any) -> bool:
        elements = session.find_elements(*locator)
        return not elements or text not in elements[0].text

    return WaitCondition(f"text {text!r} gone from {_describe(locator)}", _check)


def title_contains(fragment: str) -> WaitCondition[bool]:
    return WaitCondition(f"title containing {fragment!r}", EC.title_contains(fragment))


def url_contains(fragment: str) -> WaitCondition[bool]:
    return WaitCondition(f"URL containing {fragment!r}", EC.url_contains(fragment))


def page_loaded() -> WaitCondition[bool]:
    def _check(session: Any) -> bool:
        return str(session.execute_script("return document.readyState")).lower() == "complete"

    return WaitCondition("document ready state complete", _check)


def alert_present() -> WaitCondition[Any]:
    return WaitCondition("alert present", EC.alert_is_present())


def frame_available(frame: Union[str, Locator]) -> WaitCondition[bool]:
    """Wait for a frame and switch into it once it is available."""

    name = frame if isinstance(frame, str) else _describe(frame)
    return WaitCondition(f"frame {name} available", EC.frame_to_be_available_and_switch_to_it(frame))


def animation_done(css_selector: str) -> WaitCondition[bool]:
    script = f"return jQuery({json.dumps(css_selector)}).is(':animated')"

    def _check(session: Any) -> bool:
        return str(session.execute_script(script)).lower() == "false"

    return WaitCondition(f"animation on {css_selector!r} finished", _check)


def child_visible(parent: Locator, child: Locator) -> WaitCondition[Union[WebElement, bool]]:
    def _check(session: Any) -> Union[WebElement, bool]:
        element = session.find_element(*parent).find_element(*child)
        return element if element.is_displayed() else False

    return WaitCondition(f"{_describe(child)} visible inside {_describe(parent)}", _check)
