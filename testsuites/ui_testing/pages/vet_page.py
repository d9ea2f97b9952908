"""
Veterinarians page object: the vets table at /vets.html.
"""

from __future__ import annotations

from typing import List

from playwright.async_api import Locator

from testsuites.ui_testing.framework.page_base import BasePage


class VetPage(BasePage):
    """Veterinarian list."""

    URL_PATH = "/vets.html"
    PAGE_TITLE = "Veterinarians"

    def vets_table(self) -> Locator:
        return self.page.locator("table#vets")

    def vet_rows(self) -> Locator:
        return self.vets_table().locator("tbody tr")

    async def vet_names(self) -> List[str]:
        texts = await self.vet_rows().locator("td:first-child").all_inner_texts()
        return [text.strip() for text in texts]
