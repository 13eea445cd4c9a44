"""Turn a session descriptor into a live browser session."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, Mapping, Optional

import httpx
from selenium import webdriver
from selenium.webdriver.remote.file_detector import LocalFileDetector
from selenium.webdriver.remote.webdriver import WebDriver

from ..console.drain import DEFAULT_NOISY_SCRIPTS, drain_console
from ..console.monitor import attach
from ..errors import ConfigurationError, ProvisioningError
from ..models import BrowserFamily, ConsoleThreshold, ExecutionMode, SessionDescriptor
from .base import BrowserSession
from .capabilities import BrowserOptions, build_options
from .display import VirtualDisplay, needs_virtual_display
from .webdriver_session import DEAD_SESSION_ERRORS, WebDriverSession
from .window import prepare_window

LOGGER = logging.getLogger(__name__)

DriverFactory = Callable[..., WebDriver]

LOCAL_DRIVERS: Mapping[BrowserFamily, DriverFactory] = {
    BrowserFamily.CHROME: webdriver.Chrome,
    BrowserFamily.EDGE: webdriver.Edge,
    BrowserFamily.FIREFOX: webdriver.Firefox,
    BrowserFamily.SAFARI: webdriver.Safari,
}


class SessionProvisioner:
    """Start local browsers or open sessions on a Selenium grid."""

    def __init__(
        self,
        *,
        local_drivers: Optional[Mapping[BrowserFamily, DriverFactory]] = None,
        remote_driver: Optional[DriverFactory] = None,
        http_client: Optional[httpx.Client] = None,
        probe_timeout: float = 10.0,
        platform: Optional[str] = None,
    ) -> None:
        self._local_drivers = dict(local_drivers or LOCAL_DRIVERS)
        self._remote_driver = remote_driver or webdriver.Remote
        self._http_client = http_client
        self._probe_timeout = probe_timeout
        self._platform = platform

    def provision(self, descriptor: SessionDescriptor) -> BrowserSession:
        mode = ExecutionMode.parse(descriptor.mode)
        options = build_options(descriptor)
        display: Optional[VirtualDisplay] = None
        if mode is ExecutionMode.LOCAL:
            display = self._start_display(descriptor)
            driver = self._start_local(descriptor, options, display)
        else:
            driver = self._start_remote(descriptor, options)

        session = WebDriverSession(driver, descriptor, display=display)
        try:
            prepare_window(
                session,
                platform=self._platform,
                screen=display.size if display is not None else None,
            )
        except DEAD_SESSION_ERRORS as exc:
            session.release()
            raise ProvisioningError(f"Browser session died during setup: {exc}") from exc
        LOGGER.info("Started %s session %r", mode.value, session)
        return session

    def _start_display(self, descriptor: SessionDescriptor) -> Optional[VirtualDisplay]:
        if not descriptor.virtual_display or descriptor.headless or not needs_virtual_display():
            return None
        display = VirtualDisplay(descriptor.window_width, descriptor.window_height)
        return display if display.start() else None

    def _start_local(
        self,
        descriptor: SessionDescriptor,
        options: BrowserOptions,
        display: Optional[VirtualDisplay],
    ) -> WebDriver:
        factory = self._local_drivers.get(descriptor.browser)
        if factory is None:
            raise ConfigurationError(f"No local driver for {descriptor.browser.value}")
        try:
            if descriptor.download_directory is not None:
                descriptor.download_directory.mkdir(parents=True, exist_ok=True)
            LOGGER.info("Starting local %s driver", descriptor.browser.value)
            return factory(options=options)
        except DEAD_SESSION_ERRORS as exc:
            if display is not None:
                display.stop()
            raise ProvisioningError(
                f"Failed to start local {descriptor.browser.value} browser: {exc}"
            ) from exc

    def _start_remote(self, descriptor: SessionDescriptor, options: BrowserOptions) -> WebDriver:
        hub_url = descriptor.hub_url
        if hub_url is None:
            raise ConfigurationError("REMOTE mode requires a remote endpoint")
        self._probe(hub_url)
        LOGGER.info("Starting %s driver on %s", descriptor.browser.value, hub_url)
        try:
            driver = self._remote_driver(command_executor=hub_url, options=options)
        except DEAD_SESSION_ERRORS as exc:
            raise ProvisioningError(f"Grid at {hub_url} refused the session: {exc}") from exc
        driver.file_detector = LocalFileDetector()
        return driver

    def _probe(self, hub_url: str) -> None:
        """Fail fast when the grid endpoint cannot be reached at all."""

        url = f"{hub_url}/status"
        try:
            if self._http_client is not None:
                response = self._http_client.get(url, timeout=self._probe_timeout)
            else:
                with httpx.Client(timeout=self._probe_timeout) as client:
                    response = client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ProvisioningError(f"Selenium grid at {hub_url} is unreachable: {exc}") from exc
        if response.is_success:
            ready = _grid_ready(response)
            if ready is False:
                LOGGER.warning("Selenium grid at %s reports it is not ready", hub_url)
        else:
            LOGGER.warning("Grid status check returned HTTP %s", response.status_code)


def _grid_ready(response: httpx.Response) -> Optional[bool]:
    try:
        payload = response.json()
    except ValueError:
        return None
    value = payload.get("value") if isinstance(payload, dict) else None
    if isinstance(value, dict) and "ready" in value:
        return bool(value["ready"])
    return None


_DEFAULT_PROVISIONER: Optional[SessionProvisioner] = None


def _default_provisioner() -> SessionProvisioner:
    global _DEFAULT_PROVISIONER
    if _DEFAULT_PROVISIONER is None:
        _DEFAULT_PROVISIONER = SessionProvisioner()
    return _DEFAULT_PROVISIONER


def provision(descriptor: SessionDescriptor) -> BrowserSession:
    """Provision a session with the default provisioner."""

    return _default_provisioner().provision(descriptor)


def release(session: Optional[BrowserSession]) -> None:
    """Release ``session``; safe to call repeatedly and on dead sessions."""

    if session is None:
        LOGGER.debug("Driver object was not created")
        return
    session.release()


@contextmanager
def managed_session(
    descriptor: SessionDescriptor,
    threshold: Optional[ConsoleThreshold] = None,
    *,
    provisioner: Optional[SessionProvisioner] = None,
    name: Optional[str] = None,
    ignored: Iterable[str] = DEFAULT_NOISY_SCRIPTS,
) -> Iterator[BrowserSession]:
    """Provision, monitor, then drain the console and release on exit."""

    provisioner = provisioner or _default_provisioner()
    raw = provisioner.provision(descriptor)
    session = attach(raw, threshold) if threshold is not None else raw
    try:
        yield session
    finally:
        if raw.family.exposes_console_log:
            drain_console(raw, name=name, ignored=ignored)
        LOGGER.debug("Closing session for %s: %r", name or "session", raw)
        release(raw)
