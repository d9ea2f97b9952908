"""
================================================================================
Not-Found Page Object
================================================================================

Branded "couldn't find ..." view rendered for missing owners and pets.

================================================================================
"""

from __future__ import annotations

import re
from typing import Optional

import allure
from playwright.async_api import Locator

from testsuites.ui_testing.framework.page_base import BasePage, navigation_guard


class NotFoundPage(BasePage):
    """Friendly 404 view."""

    PAGE_TITLE = "Not Found"
    HEADING_PATTERN = re.compile(r"couldn't find", re.I)

    SECTION_SELECTOR = ".liatrio-section"
    CARD_SELECTOR = ".liatrio-error-card"

    def __init__(self, session):
        super().__init__(session)
        self.status: Optional[int] = None

    async def _open_missing(self, path: str) -> "NotFoundPage":
        target = self.url_for(path)
        with allure.step(f"Open missing resource {path}"):
            with navigation_guard(f"Open {target}"):
                response = await self.page.goto(target, wait_until="networkidle", timeout=self.navigation_timeout)
            self.status = response.status if response is not None else None
            self.session.sync_locale()
        return self

    async def open_missing_owner(self, owner_id: int) -> "NotFoundPage":
        return await self._open_missing(f"/owners/{owner_id}")

    async def open_missing_pet(self, owner_id: int, pet_id: int) -> "NotFoundPage":
        return await self._open_missing(f"/owners/{owner_id}/pets/{pet_id}/edit")

    def heading(self) -> Locator:
        return self.page.get_by_role("heading", name=self.HEADING_PATTERN)

    def message(self, text: str) -> Locator:
        return self.page.get_by_text(re.compile(re.escape(text), re.I))

    def find_owners_button(self) -> Locator:
        return self.page.locator("a.btn.btn-primary", has_text="Find Owners")

    def error_section(self) -> Locator:
        return self.page.locator(self.SECTION_SELECTOR)

    def error_card(self) -> Locator:
        return self.page.locator(self.CARD_SELECTOR)

    @allure.step("Follow Find Owners from the not-found view")
    async def follow_find_owners(self) -> None:
        button = await self.smart.locate("not_found_find_owners", timeout=self.element_timeout)
        with navigation_guard("Follow Find Owners"):
            await button.click()
            await self.page.wait_for_url(re.compile(r"/owners/find"), timeout=self.navigation_timeout)
        self.session.sync_locale()
