"""Factories for constructing components from settings."""

from __future__ import annotations

from .browser.provisioner import SessionProvisioner
from .config import GuardSettings
from .models import (
    BrowserFamily,
    ConsoleLevel,
    ConsoleThreshold,
    ExecutionMode,
    PollPolicy,
    SessionDescriptor,
)


def build_descriptor(settings: GuardSettings) -> SessionDescriptor:
    mode = ExecutionMode.parse(settings.mode)
    return SessionDescriptor.build(
        mode=mode,
        browser=BrowserFamily.parse(settings.browser),
        headless=settings.headless,
        locale=settings.locale or None,
        download_directory=settings.download_path,
        remote_endpoint=settings.remote_endpoint if mode is ExecutionMode.REMOTE else None,
        virtual_display=settings.virtual_display,
    )


def build_threshold(settings: GuardSettings) -> ConsoleThreshold:
    return ConsoleThreshold(
        level=ConsoleLevel.parse(settings.console_log_level, strict=True),
        blacklisted_urls=tuple(settings.console_blacklist),
    )


def build_policy(settings: GuardSettings) -> PollPolicy:
    return PollPolicy(
        timeout=settings.wait_timeout,
        cycles=settings.wait_cycles,
        poll_interval=settings.wait_poll_interval,
    )


def build_provisioner() -> SessionProvisioner:
    return SessionProvisioner()
