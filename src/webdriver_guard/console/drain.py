"""Best-effort dump of console entries when a session is torn down."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..browser.base import BrowserSession
from ..models import LogEntry

LOGGER = logging.getLogger(__name__)
CONSOLE_LOGGER = logging.getLogger("webdriver_guard.console")

DEFAULT_NOISY_SCRIPTS = ("scripts/src/common/eventTracking.js",)


def filter_noise(entries: Iterable[LogEntry], ignored: Iterable[str]) -> list[LogEntry]:
    ignored = tuple(ignored)
    return [entry for entry in entries if not any(item in entry.message for item in ignored)]


def drain_console(
    session: BrowserSession,
    *,
    name: Optional[str] = None,
    ignored: Iterable[str] = DEFAULT_NOISY_SCRIPTS,
) -> list[LogEntry]:
    """Log the remaining browser console entries and return them.

    Failures to fetch the log are logged and swallowed so teardown always
    reaches the point where the session is released.
    """

    try:
        entries = filter_noise(session.get_log("browser"), ignored)
    except Exception:
        LOGGER.exception("No console logs were available.")
        return []
    if entries:
        CONSOLE_LOGGER.debug("Console errors from browser (%s):", name or "session")
        for entry in entries:
            CONSOLE_LOGGER.debug("[%s] %s", entry.level.name, entry.message)
        CONSOLE_LOGGER.debug("----------------------------------")
    return entries
