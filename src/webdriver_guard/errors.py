"""Error taxonomy for webdriver-guard."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import LogEntry


class GuardError(RuntimeError):
    """Base class for all errors raised by webdriver-guard."""


class ConfigurationError(GuardError, ValueError):
    """Raised for an invalid mode, browser or option combination."""


class ProvisioningError(GuardError):
    """Raised when a browser session could not be started."""


class WaitTimeoutError(GuardError, AssertionError):
    """Raised when a condition was not satisfied within the whole budget."""

    def __init__(
        self,
        description: str,
        *,
        timeout: float,
        elapsed: float,
        cycles_used: int,
        stale_recoveries: int = 0,
    ) -> None:
        self.description = description
        self.timeout = timeout
        self.elapsed = elapsed
        self.cycles_used = cycles_used
        self.stale_recoveries = stale_recoveries
        super().__init__(
            f"{description}: not satisfied after {elapsed:.2f}s "
            f"(budget {timeout:g}s, {cycles_used} cycles, "
            f"{stale_recoveries} stale recoveries)"
        )


class ConsoleLogError(GuardError, AssertionError):
    """Raised when the browser console contains an entry violating the policy."""

    def __init__(self, entry: "LogEntry") -> None:
        self.entry = entry
        super().__init__(f"Browser console {entry.level.name}: \n{entry.message}")
