"""pytest fixtures that hand each test a provisioned, monitored browser session.

Configure through the same environment variables or ``.env`` file that
``GuardSettings`` reads, or override ``guard_settings`` / ``guard_provisioner``
in a ``conftest.py``.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from .browser.base import BrowserSession
from .browser.provisioner import SessionProvisioner, managed_session
from .config import GuardSettings, load_config
from .factory import build_descriptor, build_policy, build_provisioner, build_threshold
from .models import ConsoleThreshold, PollPolicy, SessionDescriptor
from .wait.waiter import Waiter


@pytest.fixture(scope="session")
def guard_settings() -> GuardSettings:
    return load_config()


@pytest.fixture(scope="session")
def guard_descriptor(guard_settings: GuardSettings) -> SessionDescriptor:
    return build_descriptor(guard_settings)


@pytest.fixture(scope="session")
def console_threshold(guard_settings: GuardSettings) -> ConsoleThreshold:
    return build_threshold(guard_settings)


@pytest.fixture(scope="session")
def poll_policy(guard_settings: GuardSettings) -> PollPolicy:
    return build_policy(guard_settings)


@pytest.fixture
def guard_provisioner() -> SessionProvisioner:
    return build_provisioner()


@pytest.fixture
def browser_session(
    request: pytest.FixtureRequest,
    guard_settings: GuardSettings,
    guard_descriptor: SessionDescriptor,
    console_threshold: ConsoleThreshold,
    guard_provisioner: SessionProvisioner,
) -> Iterator[BrowserSession]:
    with managed_session(
        guard_descriptor,
        console_threshold,
        provisioner=guard_provisioner,
        name=request.node.nodeid,
        ignored=guard_settings.console_ignored_scripts,
    ) as session:
        yield session


@pytest.fixture
def waiter(browser_session: BrowserSession, poll_policy: PollPolicy) -> Waiter:
    return Waiter(browser_session, poll_policy)
