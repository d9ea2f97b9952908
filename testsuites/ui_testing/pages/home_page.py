"""
================================================================================
Home Page Object
================================================================================

Landing page of the clinic application: hero banner, feature cards and the
entry points into the owner, veterinarian and visit screens.

================================================================================
"""

from __future__ import annotations

import allure
from playwright.async_api import Locator

from testsuites.ui_testing.framework.page_base import BasePage


class HomePage(BasePage):
    """Landing page object."""

    URL_PATH = "/"
    PAGE_TITLE = "Home"
    HEADING_SELECTOR = "h1"

    FEATURE_CARD_SELECTOR = ".liatrio-feature-card"

    @allure.step("Open home page")
    async def open_home(self, locale=None) -> "HomePage":
        """Open `/` and wait until the hero banner is rendered."""
        await self.open(locale=locale)
        await self.smart.locate("hero", timeout=self.element_timeout)
        return self

    def hero(self) -> Locator:
        return self.page.locator(self.smart.LOCATORS["hero"]["primary"])

    def feature_cards(self) -> Locator:
        return self.page.locator(self.FEATURE_CARD_SELECTOR)

    def brand(self) -> Locator:
        return self.page.locator(self.smart.LOCATORS["brand_text"]["primary"]).first

