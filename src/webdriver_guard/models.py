"""Shared models used across webdriver-guard."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import ConfigurationError

HUB_PATH = "/wd/hub"


class ExecutionMode(str, enum.Enum):
    """Where the browser runs."""

    LOCAL = "LOCAL"
    REMOTE = "REMOTE"

    @classmethod
    def parse(cls, value: "str | ExecutionMode") -> "ExecutionMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ConfigurationError(f"{value!r} is not a valid test mode option") from None


class BrowserFamily(str, enum.Enum):
    """Supported browser families."""

    CHROME = "chrome"
    FIREFOX = "firefox"
    SAFARI = "safari"
    EDGE = "MicrosoftEdge"

    @classmethod
    def parse(cls, value: "str | BrowserFamily") -> "BrowserFamily":
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        family = _BROWSER_ALIASES.get(name)
        if family is None:
            raise ConfigurationError(f"{value!r} is not a valid browser option")
        return family

    @property
    def exposes_console_log(self) -> bool:
        return self is BrowserFamily.CHROME


_BROWSER_ALIASES = {
    "chrome": BrowserFamily.CHROME,
    "googlechrome": BrowserFamily.CHROME,
    "firefox": BrowserFamily.FIREFOX,
    "safari": BrowserFamily.SAFARI,
    "edge": BrowserFamily.EDGE,
    "msedge": BrowserFamily.EDGE,
    "microsoftedge": BrowserFamily.EDGE,
}


class ConsoleLevel(enum.IntEnum):
    """Ordered console severity. ``OFF`` as a threshold disables the policy."""

    OFF = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    SEVERE = 4

    @classmethod
    def parse(cls, value: "str | int | ConsoleLevel", *, strict: bool = False) -> "ConsoleLevel":
        """Parse a level name; unknown names map to DEBUG unless ``strict``."""

        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        name = str(value).strip().upper()
        if name in cls.__members__:
            return cls[name]
        if name in _LEVEL_ALIASES:
            return _LEVEL_ALIASES[name]
        if strict:
            raise ConfigurationError(f"{value!r} is not a valid console log level")
        return cls.DEBUG


_LEVEL_ALIASES = {
    "ERROR": ConsoleLevel.SEVERE,
    "WARN": ConsoleLevel.WARNING,
    "CONFIG": ConsoleLevel.INFO,
}


class SessionDescriptor(BaseModel):
    """Immutable description of the session to provision."""

    model_config = ConfigDict(frozen=True)

    mode: ExecutionMode = ExecutionMode.LOCAL
    browser: BrowserFamily = BrowserFamily.CHROME
    headless: bool = False
    locale: Optional[str] = None
    download_directory: Optional[Path] = None
    remote_endpoint: Optional[str] = None
    window_width: int = Field(default=1920, gt=0)
    window_height: int = Field(default=1080, gt=0)
    virtual_display: bool = False

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value: Any) -> ExecutionMode:
        return ExecutionMode.parse(value)

    @field_validator("browser", mode="before")
    @classmethod
    def _parse_browser(cls, value: Any) -> BrowserFamily:
        return BrowserFamily.parse(value)

    @field_validator("remote_endpoint")
    @classmethod
    def _check_endpoint(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip().rstrip("/")
        if value.endswith(HUB_PATH):
            value = value[: -len(HUB_PATH)]
        parts = urlsplit(value)
        if parts.scheme not in {"http", "https"} or not parts.netloc:
            raise ValueError(f"remote endpoint must be an absolute http(s) URL, got {value!r}")
        return value

    @model_validator(mode="after")
    def _check_combination(self) -> "SessionDescriptor":
        if self.mode is ExecutionMode.REMOTE and not self.remote_endpoint:
            raise ValueError("REMOTE mode requires a remote endpoint")
        return self

    @classmethod
    def build(cls, **values: Any) -> "SessionDescriptor":
        """Validate ``values`` and return a descriptor or raise ``ConfigurationError``."""

        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

    @property
    def hub_url(self) -> Optional[str]:
        if self.remote_endpoint is None:
            return None
        return f"{self.remote_endpoint}{HUB_PATH}"


class PollPolicy(BaseModel):
    """Total wait budget split into equal polling cycles."""

    model_config = ConfigDict(frozen=True)

    timeout: float = Field(default=90.0, gt=0, description="Total budget in seconds.")
    cycles: int = Field(default=12, ge=1)
    poll_interval: float = Field(default=0.2, gt=0, description="Seconds between evaluations.")

    @property
    def cycle_window(self) -> float:
        """Length of one polling cycle in seconds."""

        return self.timeout / self.cycles


class LogEntry(BaseModel):
    """A single browser console entry."""

    model_config = ConfigDict(frozen=True)

    level: ConsoleLevel
    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: Optional[str] = None

    @classmethod
    def from_webdriver(cls, raw: dict[str, Any]) -> "LogEntry":
        """Convert an entry as returned by ``WebDriver.get_log``."""

        stamp = raw.get("timestamp")
        timestamp = (
            datetime.fromtimestamp(stamp / 1000, tz=timezone.utc)
            if isinstance(stamp, (int, float))
            else datetime.now(timezone.utc)
        )
        return cls(
            level=ConsoleLevel.parse(raw.get("level", "INFO")),
            message=str(raw.get("message", "")),
            timestamp=timestamp,
            source=raw.get("source"),
        )


class ConsoleThreshold(BaseModel):
    """Console policy: minimum failing level plus ignored URL substrings."""

    model_config = ConfigDict(frozen=True)

    level: ConsoleLevel = ConsoleLevel.OFF
    blacklisted_urls: tuple[str, ...] = ("pbs.twimg.com",)

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> ConsoleLevel:
        return ConsoleLevel.parse(value, strict=True)

    @property
    def enabled(self) -> bool:
        return self.level is not ConsoleLevel.OFF

    def is_blacklisted(self, entry: LogEntry) -> bool:
        return any(url in entry.message for url in self.blacklisted_urls)

    def is_violation(self, entry: LogEntry) -> bool:
        return self.enabled and entry.level >= self.level and not self.is_blacklisted(entry)
