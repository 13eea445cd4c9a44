"""Window sizing applied right after a session starts."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from ..models import ExecutionMode, SessionDescriptor
from .base import BrowserSession

LOGGER = logging.getLogger(__name__)

SCREEN_SIZE_SCRIPT = "return [window.screen.width, window.screen.height];"


def is_unix(platform: Optional[str] = None) -> bool:
    platform = platform or sys.platform
    return platform.startswith("linux") or platform == "darwin"


def maximize_on_unix(session: BrowserSession, screen: Optional[tuple[int, int]] = None) -> None:
    """Move the window to the origin and stretch it over the whole screen.

    Window managers on Linux and macOS often ignore the maximise command, so the
    screen size is read from the page (or taken from ``screen``) and set directly.
    """

    session.set_window_position(0, 0)
    if screen is None:
        width, height = session.execute_script(SCREEN_SIZE_SCRIPT)
        screen = (int(width), int(height))
    session.set_window_size(*screen)


def prepare_window(
    session: BrowserSession,
    *,
    platform: Optional[str] = None,
    screen: Optional[tuple[int, int]] = None,
) -> None:
    descriptor: SessionDescriptor = session.descriptor
    initial = session.get_window_size()
    if descriptor.headless:
        session.set_window_size(descriptor.window_width, descriptor.window_height)
    elif descriptor.mode is ExecutionMode.LOCAL and is_unix(platform):
        maximize_on_unix(session, screen)
    else:
        session.maximize_window()
    LOGGER.info("Window size: %s and %s after sizing", initial, session.get_window_size())
    session.delete_all_cookies()
