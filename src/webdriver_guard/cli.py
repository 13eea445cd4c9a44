"""Command line interface for webdriver-guard."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console

from .browser.provisioner import managed_session
from .config import load_config
from .errors import GuardError
from .factory import build_descriptor, build_policy, build_provisioner, build_threshold
from .wait.waiter import Waiter

app = typer.Typer(help="webdriver-guard entry point")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("webdriver-guard"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


@app.command()
def check(
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option("--env-file", help="Path to an .env file with default settings."),
    ] = None,
    mode: Annotated[
        Optional[str],
        typer.Option("--mode", help="LOCAL or REMOTE."),
    ] = None,
    browser: Annotated[
        Optional[str],
        typer.Option("--browser", help="chrome, firefox, safari or edge."),
    ] = None,
    headless: Annotated[
        Optional[bool],
        typer.Option("--headless/--headed", help="Run the browser headless (or headed)."),
    ] = None,
    url: Annotated[
        Optional[str],
        typer.Option("--url", help="Page to open."),
    ] = None,
    console_log_level: Annotated[
        Optional[str],
        typer.Option("--console-log-level", help="OFF, INFO, WARNING or SEVERE."),
    ] = None,
    selenium_host: Annotated[
        Optional[str],
        typer.Option("--selenium-host", help="Selenium grid host for REMOTE mode."),
    ] = None,
    selenium_port: Annotated[
        Optional[str],
        typer.Option("--selenium-port", help="Selenium grid port for REMOTE mode."),
    ] = None,
) -> None:
    """Provision a session, open a page under the console policy and release it."""

    overrides: dict[str, Any] = {
        "mode": mode,
        "browser": browser,
        "headless": headless,
        "url": url,
        "console_log_level": console_log_level,
        "selenium_host": selenium_host,
        "selenium_port": selenium_port,
    }
    console = Console()
    try:
        settings = load_config(config_path, env_file=env_file, **overrides)
        descriptor = build_descriptor(settings)
        threshold = build_threshold(settings)
        policy = build_policy(settings)
        console.print(
            f"Provisioning {descriptor.browser.value} ({descriptor.mode.value}, "
            f"headless={descriptor.headless})",
            style="cyan",
        )
        with managed_session(
            descriptor,
            threshold,
            provisioner=build_provisioner(),
            name="check",
            ignored=settings.console_ignored_scripts,
        ) as session:
            session.get(settings.url)
            Waiter(session, policy).page_loaded()
            console.print(f"Title: {session.title}", style="green")
            console.print(f"URL: {session.current_url}", style="green")
    except GuardError as exc:
        console.print(f"Check failed: {exc}", style="red")
        raise typer.Exit(code=1) from exc
    typer.echo("Session check completed successfully.")


if __name__ == "__main__":
    app()
