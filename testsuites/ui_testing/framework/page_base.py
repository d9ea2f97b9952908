"""
================================================================================
Base Page Object
================================================================================

Foundation class for the clinic Page Object Model.

Provides:
    - Locale-preserving navigation (open, navbar links, reload, back)
    - The primary heading of each screen
    - Named element location through SmartLocator
    - Timeout translation into NavigationTimeout
    - Screenshot capture attached to Allure

Page objects never assert. They either reach the expected state or raise.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Pattern, Union

import allure
from loguru import logger
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from clinic_tools.report_tools.allure_utils import attach_file

from .browser_manager import BrowserSession
from .components import LanguageSelector
from .errors import NavigationTimeout
from .locale_context import LocaleContext
from .smart_locator import SmartLocator


UrlPattern = Union[str, Pattern[str]]

HOME_URL = re.compile(r"://[^/]+/(\?[^#]*)?(#.*)?$")
FIND_OWNERS_URL = re.compile(r"/owners/find(\?|$)")
VETS_URL = re.compile(r"/vets(\.html)?(\?|$)")
UPCOMING_VISITS_URL = re.compile(r"/visits/upcoming(\?|$)")


@contextmanager
def navigation_guard(description: str) -> Iterator[None]:
    """Re-raise Playwright timeouts inside the block as NavigationTimeout."""
    try:
        yield
    except PlaywrightTimeoutError as e:
        first_line = str(e).splitlines()[0] if str(e) else "timeout"
        raise NavigationTimeout(f"{description}: {first_line}") from e


class BasePage:
    """
    Base class for all clinic page objects.

    Subclasses set URL_PATH (where `open()` goes by default) and, when the
    screen's title is not the first h2, HEADING_SELECTOR.

    Usage:
        class VetPage(BasePage):
            URL_PATH = "/vets.html"

            def vets_table(self) -> Locator:
                return self.page.locator("table#vets")
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""
    HEADING_SELECTOR: str = "h2"

    def __init__(self, session: BrowserSession):
        """
        Initialize page object.

        Args:
            session: The test's browser session
        """
        self.session = session
        self.page: Page = session.page
        self.base_url = session.base_url
        self.smart = SmartLocator(self.page)
        session.register_locator(self.smart)
        self.language = LanguageSelector(self)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def navigation_timeout(self) -> int:
        return self.session.config.navigation_timeout_ms

    @property
    def element_timeout(self) -> int:
        return self.session.config.element_timeout_ms

    @property
    def locale(self) -> LocaleContext:
        """Locale of the session as of the last navigation."""
        return self.session.locale

    @property
    def url(self) -> str:
        """Current page URL."""
        return self.page.url

    def url_for(self, path: Optional[str] = None, locale: Optional[LocaleContext] = None) -> str:
        """
        Absolute URL for `path` carrying the locale.

        Args:
            path: Application path, defaults to URL_PATH
            locale: Explicit locale, defaults to the session locale
        """
        locale = locale or self.session.locale
        return f"{self.base_url}{locale.apply(path or self.URL_PATH)}"

    # =========================================================================
    # Navigation
    # =========================================================================

    async def open(
        self,
        path: Optional[str] = None,
        locale: Optional[LocaleContext] = None,
        wait_for: str = "networkidle",
    ):
        """
        Navigate to `path` (default URL_PATH) and wait for network idle.

        Returns:
            self, for chaining

        Raises:
            NavigationTimeout: The page did not settle in time
        """
        target = self.url_for(path, locale)
        with allure.step(f"Open {target}"):
            with navigation_guard(f"Open {target}"):
                await self.page.goto(target, wait_until=wait_for, timeout=self.navigation_timeout)
            self.session.sync_locale()
            logger.debug(f"Navigated to: {self.page.url}")
        return self

    def heading(self) -> Locator:
        """Primary heading of the screen."""
        return self.page.locator(self.HEADING_SELECTOR).first

    async def _follow_nav_link(self, element_name: str, expected_url: UrlPattern) -> None:
        link = await self.smart.locate(element_name, timeout=self.element_timeout)
        with navigation_guard(f"Follow {element_name}"):
            await link.click()
            await self.page.wait_for_url(expected_url, timeout=self.navigation_timeout)
            await self.page.wait_for_load_state("networkidle", timeout=self.navigation_timeout)
        self.session.sync_locale()

    @allure.step("Go to Home")
    async def go_home(self) -> None:
        """Follow the navbar Home link (keeps the locale)."""
        await self._follow_nav_link("nav_home", HOME_URL)

    @allure.step("Go to Find Owners")
    async def go_find_owners(self) -> None:
        """Follow the navbar Find Owners link (keeps the locale)."""
        await self._follow_nav_link("nav_find_owners", FIND_OWNERS_URL)

    @allure.step("Go to Veterinarians")
    async def go_veterinarians(self) -> None:
        """Follow the navbar Veterinarians link (keeps the locale)."""
        await self._follow_nav_link("nav_veterinarians", VETS_URL)

    @allure.step("Go to Upcoming Visits")
    async def go_upcoming_visits(self) -> None:
        """Follow the navbar Upcoming Visits link (keeps the locale)."""
        await self._follow_nav_link("nav_upcoming_visits", UPCOMING_VISITS_URL)

    @allure.step("Reload page")
    async def reload(self) -> None:
        with navigation_guard("Reload"):
            await self.page.reload(wait_until="networkidle", timeout=self.navigation_timeout)
        self.session.sync_locale()

    @allure.step("Navigate back")
    async def go_back(self) -> None:
        with navigation_guard("Back navigation"):
            await self.page.go_back(wait_until="networkidle", timeout=self.navigation_timeout)
        self.session.sync_locale()

    # =========================================================================
    # Wait Utilities
    # =========================================================================

    async def wait_for_page_load(self, state: str = "networkidle", timeout: Optional[int] = None) -> None:
        """
        Wait for the page to reach a stable load state.

        Args:
            state: Playwright load state ('load', 'domcontentloaded', 'networkidle')
            timeout: Timeout in milliseconds (defaults to the navigation timeout)
        """
        with navigation_guard(f"Wait for {state}"):
            await self.page.wait_for_load_state(state, timeout=timeout or self.navigation_timeout)

    async def wait_for_url(self, url_pattern: UrlPattern, timeout: Optional[int] = None) -> None:
        """
        Wait for URL to match a glob or regex.

        Raises:
            NavigationTimeout: URL never matched
        """
        with navigation_guard(f"Wait for URL {url_pattern}"):
            await self.page.wait_for_url(url_pattern, timeout=timeout or self.navigation_timeout)
        self.session.sync_locale()

    # =========================================================================
    # Page State
    # =========================================================================

    async def visible_text(self) -> str:
        """Rendered (visible) text of the document body."""
        return await self.page.locator("body").inner_text()

    # =========================================================================
    # Screenshot Utilities
    # =========================================================================

    async def screenshot(self, name: str, full_page: bool = True, attach_to_allure: bool = True) -> Path:
        """
        Take a screenshot into the test's output directory.

        Args:
            name: Screenshot name (without extension)
            full_page: Capture full scrollable page
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        filepath = self.session.artifact_path(f"{name}.png")
        await self.page.screenshot(path=str(filepath), full_page=full_page)

        if attach_to_allure:
            attach_file(filepath, name=name, content_type="image/png")

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath


__all__ = [
    "BasePage",
    "navigation_guard",
    "HOME_URL",
    "FIND_OWNERS_URL",
    "VETS_URL",
    "UPCOMING_VISITS_URL",
]
