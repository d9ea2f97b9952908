"""
================================================================================
Page Components
================================================================================

Reusable widgets composed into page objects.

Components:
    - LanguageSelector: navbar dropdown that switches the display language

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List

import allure
from loguru import logger
from playwright.async_api import Locator

from .locale_context import LANG_PARAM

if TYPE_CHECKING:
    from .page_base import BasePage


class LanguageSelector:
    """
    Navbar language dropdown.

    Every page object owns one as `page_object.language`. Switching the
    language navigates to the current path with `lang=<code>` and updates the
    session locale.
    """

    OPTION_SELECTOR = ".dropdown-item"
    FLAG_SELECTOR = "span[aria-hidden='true']"
    ACTIVE_CLASS = "active"

    def __init__(self, owner: "BasePage"):
        self._owner = owner

    @property
    def page(self):
        return self._owner.page

    def button(self) -> Locator:
        return self.page.locator(self._owner.smart.LOCATORS["language_button"]["primary"])

    def menu(self) -> Locator:
        return self.page.locator(self._owner.smart.LOCATORS["language_menu"]["primary"])

    def options(self) -> Locator:
        return self.menu().locator(self.OPTION_SELECTOR)

    def option(self, code: str) -> Locator:
        """Dropdown entry linking to `lang=<code>`."""
        return self.menu().locator(f"{self.OPTION_SELECTOR}[href*='{LANG_PARAM}={code}']")

    def flags(self) -> Locator:
        """Decorative flag glyphs of all entries."""
        return self.options().locator(self.FLAG_SELECTOR)

    @allure.step("Open language menu")
    async def open_menu(self) -> None:
        button = await self._owner.smart.locate("language_button", timeout=self._owner.element_timeout)
        if await button.get_attribute("aria-expanded") != "true":
            await button.click()
        await self.menu().wait_for(state="visible", timeout=self._owner.element_timeout)

    @allure.step("Close language menu")
    async def close_menu(self) -> None:
        await self.page.keyboard.press("Escape")
        await self.menu().wait_for(state="hidden", timeout=self._owner.element_timeout)

    async def option_labels(self) -> List[str]:
        """Visible text of each entry, in dropdown order."""
        return [text.strip() for text in await self.options().all_inner_texts()]

    async def option_codes(self) -> List[str]:
        """Locale code each entry links to, in dropdown order."""
        codes: List[str] = []
        for href in await self.options().evaluate_all("els => els.map(e => e.getAttribute('href'))"):
            match = re.search(rf"[?&]{LANG_PARAM}=([^&#]+)", href or "")
            codes.append(match.group(1) if match else "")
        return codes

    async def active_code(self) -> str:
        """Code of the entry marked active, or '' when none is."""
        active = self.menu().locator(f"{self.OPTION_SELECTOR}.{self.ACTIVE_CLASS}")
        if await active.count() == 0:
            return ""
        href = await active.first.get_attribute("href") or ""
        match = re.search(rf"[?&]{LANG_PARAM}=([^&#]+)", href)
        return match.group(1) if match else ""

    async def select(self, code: str) -> None:
        """
        Switch to `code` via the dropdown.

        Raises:
            NavigationTimeout: URL never carried the new locale
        """
        with allure.step(f"Switch language to {code}"):
            await self.open_menu()
            await self.option(code).click()
            await self._owner.wait_for_url(re.compile(rf"[?&]{LANG_PARAM}={re.escape(code)}(&|#|$)"))
            await self._owner.wait_for_page_load()
            logger.info(f"Language switched to {code}: {self.page.url}")


__all__ = [
    "LanguageSelector",
]
