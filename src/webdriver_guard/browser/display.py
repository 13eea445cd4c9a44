"""Virtual X display for headed local browsers on display-less Unix hosts."""

from __future__ import annotations

import logging
import os
import shutil
import sys
from typing import Optional

from pyvirtualdisplay import Display

LOGGER = logging.getLogger(__name__)


def needs_virtual_display() -> bool:
    """Return True on Linux hosts that have no X display to draw on."""

    return sys.platform.startswith("linux") and not os.environ.get("DISPLAY")


class VirtualDisplay:
    """Manage an Xvfb display lifecycle for a single browser session."""

    def __init__(self, width: int = 1920, height: int = 1080) -> None:
        self._width = width
        self._height = height
        self._display: Optional[Display] = None

    def __enter__(self) -> "VirtualDisplay":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    @property
    def size(self) -> tuple[int, int]:
        return self._width, self._height

    @property
    def running(self) -> bool:
        return self._display is not None

    def start(self) -> bool:
        if self._display is not None:
            return True
        if shutil.which("Xvfb") is None:
            LOGGER.warning("Xvfb not found; starting the browser without a virtual display")
            return False
        LOGGER.debug("Starting virtual display %sx%s", self._width, self._height)
        self._display = Display(visible=False, size=(self._width, self._height))
        self._display.start()
        return True

    def stop(self) -> None:
        if self._display is None:
            return
        LOGGER.debug("Stopping virtual display")
        try:
            self._display.stop()
        except OSError:  # pragma: no cover - Xvfb already gone
            LOGGER.debug("Virtual display was already stopped", exc_info=True)
        self._display = None
