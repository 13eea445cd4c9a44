"""Per-family browser option builders."""

from __future__ import annotations

import logging
from typing import Callable, Union

from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.common.options import ArgOptions
from selenium.webdriver.edge.options import Options as EdgeOptions
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.safari.options import Options as SafariOptions

from ..errors import ConfigurationError
from ..models import BrowserFamily, SessionDescriptor

LOGGER = logging.getLogger(__name__)

LOG_CHANNELS = {"browser": "ALL", "driver": "ALL", "performance": "ALL"}

FIREFOX_SAVE_TO_DISK_TYPES = ", ".join(
    [
        "application/msword",
        "application/csv",
        "application/vnd.ms-powerpoint",
        "application/ris",
        "text/csv",
        "image/png",
        "application/pdf",
        "text/html",
        "text/plain",
        "application/zip",
        "application/x-zip",
        "application/x-zip-compressed",
        "application/download",
        "application/octet-stream",
        "application/xls",
        "application/vnd.ms-excel",
        "application/x-xls",
        "application/x-ms-excel",
        "application/msexcel",
        "application/x-msexcel",
        "application/x-excel",
    ]
)

BrowserOptions = Union[ChromeOptions, EdgeOptions, FirefoxOptions, SafariOptions]


def _apply_common(options: ArgOptions) -> None:
    options.page_load_strategy = "normal"
    options.accept_insecure_certs = True
    options.set_capability("unhandledPromptBehavior", "ignore")


def _configure_chromium(
    options: Union[ChromeOptions, EdgeOptions],
    descriptor: SessionDescriptor,
    logging_key: str,
) -> None:
    options.set_capability(logging_key, dict(LOG_CHANNELS))
    prefs: dict[str, object] = {
        "profile.default_content_settings.popups": 0,
        "download.prompt_for_download": False,
        "download.directory_upgrade": True,
    }
    if descriptor.download_directory is not None:
        prefs["download.default_directory"] = str(descriptor.download_directory)
    options.add_experimental_option("prefs", prefs)
    for argument in ("--allow-outdated-plugins", "--no-sandbox", "--start-maximized"):
        options.add_argument(argument)
    if descriptor.headless:
        # The headless window is not limited to the size of a physical display.
        options.add_argument("--headless=new")
        options.add_argument("--disable-gpu")
        options.add_argument(
            f"--window-size={descriptor.window_width},{descriptor.window_height}"
        )
    if descriptor.locale:
        options.add_argument(f"--lang={descriptor.locale}")


def chrome_options(descriptor: SessionDescriptor) -> ChromeOptions:
    options = ChromeOptions()
    _apply_common(options)
    _configure_chromium(options, descriptor, "goog:loggingPrefs")
    return options


def edge_options(descriptor: SessionDescriptor) -> EdgeOptions:
    options = EdgeOptions()
    _apply_common(options)
    _configure_chromium(options, descriptor, "ms:loggingPrefs")
    return options


def firefox_options(descriptor: SessionDescriptor) -> FirefoxOptions:
    options = FirefoxOptions()
    _apply_common(options)
    options.log.level = "trace"
    if descriptor.download_directory is not None:
        options.set_preference("browser.download.folderList", 2)
        options.set_preference("browser.download.dir", str(descriptor.download_directory))
    options.set_preference("browser.download.manager.showWhenStarting", False)
    options.set_preference("browser.helperApps.neverAsk.saveToDisk", FIREFOX_SAVE_TO_DISK_TYPES)
    if descriptor.locale:
        options.set_preference("intl.accept_languages", descriptor.locale)
    if descriptor.headless:
        options.add_argument("-headless")
        options.add_argument(f"--width={descriptor.window_width}")
        options.add_argument(f"--height={descriptor.window_height}")
    return options


def safari_options(descriptor: SessionDescriptor) -> SafariOptions:
    options = SafariOptions()
    _apply_common(options)
    if descriptor.headless:
        LOGGER.warning("Safari has no headless mode; starting a regular window")
    return options


OPTION_BUILDERS: dict[BrowserFamily, Callable[[SessionDescriptor], BrowserOptions]] = {
    BrowserFamily.CHROME: chrome_options,
    BrowserFamily.EDGE: edge_options,
    BrowserFamily.FIREFOX: firefox_options,
    BrowserFamily.SAFARI: safari_options,
}


def build_options(descriptor: SessionDescriptor) -> BrowserOptions:
    """Return the selenium options object for the descriptor's browser family."""

    try:
        builder = OPTION_BUILDERS[descriptor.browser]
    except KeyError:
        raise ConfigurationError(f"{descriptor.browser!r} is not a supported browser") from None
    LOGGER.debug("Building %s options for %s mode", descriptor.browser.value, descriptor.mode.value)
    return builder(descriptor)
