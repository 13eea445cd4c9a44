"""Configuration for webdriver-guard."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


def _alias(name: str, field_name: str) -> AliasChoices:
    return AliasChoices(field_name, name)


class GuardSettings(BaseSettings):
    """Run-wide settings read from the environment, a .env file and YAML."""

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=(".env",),
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    selenium_host: str = Field(
        default="localhost", validation_alias=_alias("seleniumHost", "selenium_host")
    )
    selenium_port: str = Field(
        default="4444", validation_alias=_alias("seleniumPort", "selenium_port")
    )
    url: str = Field(default="https://www.google.com", description="Application under test.")
    console_log_level: str = Field(
        default="OFF", validation_alias=_alias("consoleloglevel", "console_log_level")
    )
    mode: str = Field(default="LOCAL")
    browser: str = Field(default="chrome")
    locale: str = Field(default="en")
    download_path: Path = Field(
        default_factory=lambda: Path.home() / "Downloads",
        validation_alias=_alias("downloadPath", "download_path"),
    )
    headless: bool = False
    virtual_display: bool = Field(
        default=False, validation_alias=_alias("virtualDisplay", "virtual_display")
    )
    console_blacklist: list[str] = Field(
        default_factory=lambda: ["pbs.twimg.com"],
        validation_alias=_alias("consoleBlacklist", "console_blacklist"),
    )
    console_ignored_scripts: list[str] = Field(
        default_factory=lambda: ["scripts/src/common/eventTracking.js"],
        validation_alias=_alias("consoleIgnoredScripts", "console_ignored_scripts"),
    )
    wait_timeout: float = Field(default=90.0, gt=0)
    wait_cycles: int = Field(default=12, ge=1)
    wait_poll_interval: float = Field(default=0.2, gt=0)

    @property
    def remote_endpoint(self) -> str:
        return f"http://{self.selenium_host}:{self.selenium_port}"


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> GuardSettings:
    """Load settings from an optional YAML file, the environment and overrides.

    Overrides win over the file, which wins over environment variables.
    """

    data: dict[str, Any] = {}
    if path:
        import yaml

        data = _field_names(yaml.safe_load(path.read_text()) or {})
    if overrides:
        _deep_update(data, _field_names({k: v for k, v in overrides.items() if v is not None}))
    settings_kwargs: dict[str, object] = {}
    if env_file is not None:
        settings_kwargs["_env_file"] = env_file
    try:
        return GuardSettings(**data, **settings_kwargs)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    """Recursively merge ``updates`` into ``target`` in-place."""

    for key, value in updates.items():
        if isinstance(value, Mapping) and isinstance(existing := target.get(key), Mapping):
            nested = existing if isinstance(existing, dict) else dict(existing)
            _deep_update(nested, value)
            target[key] = nested
        else:
            target[key] = value


def _field_names(values: Mapping[str, Any]) -> dict[str, Any]:
    """Rename property-style keys such as ``seleniumHost`` to field names."""

    aliases: dict[str, str] = {}
    for name, field in GuardSettings.model_fields.items():
        aliases[name.lower()] = name
        if isinstance(field.validation_alias, AliasChoices):
            for choice in field.validation_alias.choices:
                if isinstance(choice, str):
                    aliases[choice.lower()] = name
    return {aliases.get(key.lower(), key): value for key, value in values.items()}
