"""
================================================================================
Owner Page Object
================================================================================

Owner search, owner list, owner creation form and owner details.

Search routing (application behavior):
    - exactly one match  -> redirect to /owners/{id} (details view)
    - zero matches       -> search form re-rendered with "has not been found"
    - several matches    -> paginated list (table#owners, 5 rows per page)

================================================================================
"""

from __future__ import annotations

import re
from typing import List, Mapping, Optional, Union

import allure
from loguru import logger
from playwright.async_api import Locator

from testsuites.ui_testing.framework.data_factory import SyntheticOwner
from testsuites.ui_testing.framework.page_base import BasePage, navigation_guard


OwnerData = Union[SyntheticOwner, Mapping[str, str]]

DETAILS_URL = re.compile(r"/owners/(\d+)(\?|#|$)")
CREATION_URL = re.compile(r"/owners/new(\?|#|$)")
SEARCH_RESULT_URL = re.compile(r"/owners(/\d+)?(\?|#|$)")

FORM_FIELDS = ("firstName", "lastName", "address", "city", "telephone")


class OwnerPage(BasePage):
    """Owner search / list / form / details page object."""

    URL_PATH = "/owners/find"
    PAGE_TITLE = "Find Owners"

    OWNERS_TABLE = "table#owners"
    DETAILS_HEADING = "Owner Information"
    NOT_FOUND_TEXT = "has not been found"
    FIELD_ERROR = ".help-inline"
    PAGE_SIZE = 5

    # ============================================================
    # Search
    # ============================================================

    @allure.step("Open Find Owners")
    async def open_find_owners(self) -> "OwnerPage":
        """Open the search form and wait for the last-name input."""
        await self.open()
        await self.smart.locate("owner_last_name_input", timeout=self.element_timeout)
        return self

    async def search_by_last_name(self, value: str = "") -> None:
        """
        Submit the search form. An empty value lists every owner.

        Lands on the details view, the list, or the search form with a
        "not found" message depending on the number of matches.
        """
        with allure.step(f"Search owners by last name '{value}'"):
            await self.smart.fill("owner_last_name_input", value, timeout=self.element_timeout)
            button = await self.smart.locate("find_owner_button", timeout=self.element_timeout)
            with navigation_guard(f"Search for '{value}'"):
                async with self.page.expect_navigation(
                    url=SEARCH_RESULT_URL,
                    wait_until="networkidle",
                    timeout=self.navigation_timeout,
                ):
                    await button.click()
            self.session.sync_locale()
            logger.debug(f"Search '{value}' landed on {self.page.url}")

    async def open_search_results(self, last_name: str = "", page_number: int = 1) -> "OwnerPage":
        """Open `/owners?lastName=...&page=N` directly."""
        await self.open(f"/owners?lastName={last_name}&page={page_number}")
        return self

    def owners_table(self) -> Locator:
        return self.page.locator(self.OWNERS_TABLE)

    def owner_rows(self) -> Locator:
        return self.page.locator(f"{self.OWNERS_TABLE} tbody tr")

    async def owner_names(self) -> List[str]:
        """Full names in the first column of the list, in display order."""
        texts = await self.page.locator(f"{self.OWNERS_TABLE} tbody tr td:first-child").all_inner_texts()
        return [text.strip() for text in texts]

    def pagination_links(self) -> Locator:
        """Links of the result pager."""
        return self.page.locator(".pagination a[href]")

    def not_found_message(self) -> Locator:
        return self.page.get_by_text(self.NOT_FOUND_TEXT)

    async def open_owner_details_by_name(self, full_name: str) -> None:
        """Click the owner link in the list and wait for the details view."""
        with allure.step(f"Open owner details for '{full_name}'"):
            link = self.owners_table().get_by_role("link", name=full_name, exact=True)
            with navigation_guard(f"Open details of '{full_name}'"):
                await link.click(timeout=self.element_timeout)
                await self.page.wait_for_url(DETAILS_URL, timeout=self.navigation_timeout)
                await self.page.wait_for_load_state("networkidle", timeout=self.navigation_timeout)
            self.session.sync_locale()

    async def count_search_results(self, last_name: str, max_pages: int = 50) -> int:
        """
        Number of owners the search for `last_name` returns, across pages.

        Navigates away from the current page.
        """
        with allure.step(f"Count owners matching '{last_name}'"):
            await self.open_search_results(last_name)
            if self.is_on_details_view():
                return 1
            if await self.owner_rows().count() == 0:
                return 0

            total = await self.owner_rows().count()
            page_number = 1
            while page_number < max_pages:
                next_link = self.page.locator(f"a[href*='page={page_number + 1}']")
                if await next_link.count() == 0:
                    break
                page_number += 1
                await self.open_search_results(last_name, page_number)
                total += await self.owner_rows().count()
            logger.debug(f"Owners matching '{last_name}': {total}")
            return total

    # ============================================================
    # Export
    # ============================================================

    def export_link(self) -> Locator:
        return self.page.locator(self.smart.LOCATORS["export_csv_link"]["primary"]).first

    async def export_href(self) -> str:
        link = await self.smart.locate("export_csv_link", timeout=self.element_timeout)
        return await link.get_attribute("href") or ""

    # ============================================================
    # Creation form
    # ============================================================

    @allure.step("Click Add Owner")
    async def click_add_owner(self) -> None:
        link = await self.smart.locate("add_owner_link", timeout=self.element_timeout)
        with navigation_guard("Open owner creation form"):
            await link.click()
            await self.page.wait_for_url(CREATION_URL, timeout=self.navigation_timeout)
        self.session.sync_locale()
        await self.form_field("firstName").wait_for(state="visible", timeout=self.element_timeout)

    def form_field(self, field_id: str) -> Locator:
        return self.page.locator(f"input#{field_id}")

    @allure.step("Fill owner form")
    async def fill_owner_form(self, data: OwnerData) -> None:
        """Type every field of `data` into the form (input ids as keys)."""
        values = data.form_values() if isinstance(data, SyntheticOwner) else dict(data)
        for field_id in FORM_FIELDS:
            if field_id in values:
                await self.form_field(field_id).fill(values[field_id])

    async def submit_owner_form(self) -> None:
        """
        Submit the form and wait for the server response page.

        Lands on the details view when the owner was created, or on the
        re-rendered form when it was rejected.
        """
        with allure.step("Submit owner form"):
            button = await self.smart.locate("owner_form_submit", timeout=self.element_timeout)
            with navigation_guard("Submit owner form"):
                async with self.page.expect_navigation(
                    wait_until="networkidle",
                    timeout=self.navigation_timeout,
                ):
                    await button.click()
            self.session.sync_locale()
            logger.debug(f"Owner form submitted, now at {self.page.url}")

    async def create_owner(self, owner: SyntheticOwner) -> None:
        """Search page -> Add Owner -> fill -> submit."""
        await self.open_find_owners()
        await self.click_add_owner()
        await self.fill_owner_form(owner)
        await self.submit_owner_form()

    def form_error(self, text: Optional[str] = None) -> Locator:
        """Global or per-field error message, optionally filtered by text."""
        if text is not None:
            return self.page.get_by_text(text, exact=False)
        return self.page.locator(f"{self.FIELD_ERROR}, .alert-danger")

    # ============================================================
    # Details view
    # ============================================================

    def is_on_details_view(self) -> bool:
        return DETAILS_URL.search(self.page.url) is not None

    def is_on_creation_form(self) -> bool:
        return CREATION_URL.search(self.page.url) is not None

    def owner_id_from_url(self) -> Optional[int]:
        match = DETAILS_URL.search(self.page.url)
        return int(match.group(1)) if match else None

    def details_heading(self) -> Locator:
        return self.page.get_by_role("heading", name=re.compile(self.DETAILS_HEADING, re.I))

    def details_cell(self, text: str) -> Locator:
        return self.page.get_by_role("cell", name=text, exact=True)

    async def open_details(self, owner_id: int) -> "OwnerPage":
        await self.open(f"/owners/{owner_id}")
        return self

    @allure.step("Click Add Visit for pet")
    async def click_add_visit(self, pet_index: int = 0) -> None:
        """Follow the "Add Visit" link of the pet at `pet_index` on the details view."""
        link = self.page.locator("a[href*='/visits/new']").nth(pet_index)
        with navigation_guard("Open visit form"):
            await link.click(timeout=self.element_timeout)
            await self.page.wait_for_url(re.compile(r"/pets/\d+/visits/new"), timeout=self.navigation_timeout)
        self.session.sync_locale()


__all__ = [
    "OwnerPage",
    "OwnerData",
    "DETAILS_URL",
    "CREATION_URL",
    "FORM_FIELDS",
]
