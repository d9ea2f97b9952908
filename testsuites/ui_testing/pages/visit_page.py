"""
================================================================================
Visit Page Objects
================================================================================

Pages for visits:
    - UpcomingVisitsPage: filterable list of scheduled visits (/visits/upcoming)
    - VisitFormPage: "Add Visit" form of a pet (/owners/{id}/pets/{petId}/visits/new)

================================================================================
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

import allure
from loguru import logger
from playwright.async_api import Locator

from testsuites.ui_testing.framework.data_factory import SyntheticVisit
from testsuites.ui_testing.framework.page_base import BasePage, navigation_guard


UPCOMING_URL = re.compile(r"/visits/upcoming(\?|#|$)")
PETS_AND_VISITS_HEADING = "Pets and Visits"

FILTER_PARAMS = ("fromDate", "toDate", "petType", "ownerLastName")


# ================================================================================
# Upcoming Visits
# ================================================================================

class UpcomingVisitsPage(BasePage):
    """Upcoming visits list with date / pet type / owner filters."""

    URL_PATH = "/visits/upcoming"
    PAGE_TITLE = "Upcoming Visits"

    SUBTITLE = "All scheduled future visits sorted chronologically"
    EMPTY_STATE = "No upcoming visits scheduled"
    COLUMNS = ("Visit Date", "Pet Name", "Owner Name", "Description")

    # Filter label -> query parameter
    FILTER_LABELS: Dict[str, str] = {
        "fromDate": "From Date",
        "toDate": "To Date",
        "petType": "Pet Type",
        "ownerLastName": "Owner Last Name",
    }

    @allure.step("Open Upcoming Visits")
    async def open_upcoming(self, **filters: str) -> "UpcomingVisitsPage":
        """
        Open the page, optionally with filters already in the query string.

        Args:
            **filters: Any of fromDate, toDate, petType, ownerLastName
        """
        unknown = set(filters) - set(FILTER_PARAMS)
        if unknown:
            raise TypeError(f"Unknown visit filter(s): {', '.join(sorted(unknown))}")
        query = "&".join(f"{key}={value}" for key, value in filters.items())
        await self.open(f"{self.URL_PATH}?{query}" if query else None)
        return self

    def filter_input(self, param: str) -> Locator:
        return self.page.get_by_label(re.compile(self.FILTER_LABELS[param], re.I))

    def visits_table(self) -> Locator:
        return self.page.locator("table").first

    def visit_rows(self) -> Locator:
        return self.visits_table().locator("tbody tr")

    def column_header(self, name: str) -> Locator:
        return self.page.get_by_role("columnheader", name=re.compile(name, re.I))

    def subtitle(self) -> Locator:
        return self.page.get_by_text(re.compile(self.SUBTITLE, re.I))

    def empty_state(self) -> Locator:
        return self.page.get_by_text(re.compile(self.EMPTY_STATE, re.I))

    async def set_filters(
        self,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        pet_type: Optional[str] = None,
        owner_last_name: Optional[str] = None,
    ) -> None:
        """Type filter values into the form without submitting."""
        if from_date is not None:
            await self.filter_input("fromDate").fill(from_date)
        if to_date is not None:
            await self.filter_input("toDate").fill(to_date)
        if pet_type is not None:
            await self.filter_input("petType").select_option(pet_type)
        if owner_last_name is not None:
            await self.filter_input("ownerLastName").fill(owner_last_name)

    @allure.step("Apply visit filters")
    async def apply_filters(self) -> None:
        button = await self.smart.locate("apply_filters_button", timeout=self.element_timeout)
        with navigation_guard("Apply visit filters"):
            async with self.page.expect_navigation(
                url=UPCOMING_URL,
                wait_until="networkidle",
                timeout=self.navigation_timeout,
            ):
                await button.click()
        self.session.sync_locale()
        logger.debug(f"Filters applied: {self.page.url}")

    async def filter_by(self, **filters: str) -> None:
        """set_filters() followed by apply_filters()."""
        await self.set_filters(**filters)
        await self.apply_filters()

    @allure.step("Clear visit filters")
    async def clear_filters(self) -> None:
        link = await self.smart.locate("clear_filters_link", timeout=self.element_timeout)
        with navigation_guard("Clear visit filters"):
            await link.click()
            await self.page.wait_for_url(UPCOMING_URL, timeout=self.navigation_timeout)
            await self.page.wait_for_load_state("networkidle", timeout=self.navigation_timeout)
        self.session.sync_locale()

    async def filter_values(self) -> Dict[str, str]:
        """Current value of each filter input, keyed by query parameter."""
        return {param: await self.filter_input(param).input_value() for param in FILTER_PARAMS}

    async def visit_descriptions(self) -> List[str]:
        texts = await self.visit_rows().locator("td:last-child").all_inner_texts()
        return [text.strip() for text in texts]


# ================================================================================
# Visit Form
# ================================================================================

class VisitFormPage(BasePage):
    """New-visit form of one pet."""

    URL_PATH = "/owners/1/pets/1/visits/new"
    PAGE_TITLE = "New Visit"

    def date_input(self) -> Locator:
        return self.page.locator("input#date")

    def description_input(self) -> Locator:
        return self.page.locator("input#description")

    def field_errors(self, text: Optional[str] = None) -> Locator:
        errors = self.page.locator(".help-inline")
        if text is not None:
            errors = errors.filter(has_text=re.compile(text, re.I))
        return errors

    async def open_for_pet(self, owner_id: int, pet_id: int) -> "VisitFormPage":
        await self.open(f"/owners/{owner_id}/pets/{pet_id}/visits/new")
        await self.date_input().wait_for(state="visible", timeout=self.element_timeout)
        return self

    @allure.step("Fill visit form")
    async def fill_visit_form(self, visit: SyntheticVisit) -> None:
        await self.date_input().fill(visit.date_text)
        await self.description_input().fill(visit.description)

    async def submit_visit_form(self) -> None:
        """
        Submit and wait for the server response: the owner details view
        when accepted, the re-rendered form when rejected.
        """
        with allure.step("Submit visit form"):
            button = await self.smart.locate("visit_form_submit", timeout=self.element_timeout)
            with navigation_guard("Submit visit form"):
                async with self.page.expect_navigation(
                    wait_until="networkidle",
                    timeout=self.navigation_timeout,
                ):
                    await button.click()
            self.session.sync_locale()

    async def schedule(self, visit: SyntheticVisit) -> None:
        await self.fill_visit_form(visit)
        await self.submit_visit_form()

    def pets_and_visits_heading(self) -> Locator:
        return self.page.get_by_role("heading", name=re.compile(PETS_AND_VISITS_HEADING, re.I))


__all__ = [
    "UpcomingVisitsPage",
    "VisitFormPage",
    "FILTER_PARAMS",
    "UPCOMING_URL",
]
