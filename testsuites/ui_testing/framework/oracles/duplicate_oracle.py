"""
================================================================================
Duplicate-Prevention Oracle
================================================================================

Business rule: an owner is a duplicate of an existing one when the trimmed,
lower-cased first and last names and the normalized telephone all match.
Address and city do not take part.

A duplicate submission must
    - keep the browser on the creation form (/owners/new)
    - show "An owner with this information already exists"
    - keep the submitted values in the form
    - leave the owner count unchanged

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

import allure
from loguru import logger

from ..data_factory import SyntheticOwner
from ..reference_data import DUPLICATE_OWNER_MESSAGE
from .base import check, expect_value, expect_visible

if TYPE_CHECKING:
    from testsuites.ui_testing.pages.owner_page import OwnerPage


def is_duplicate(candidate: SyntheticOwner, existing: SyntheticOwner) -> bool:
    """True when both records share the dedup key."""
    return candidate.dedup_key() == existing.dedup_key()


def find_duplicate(candidate: SyntheticOwner, existing: Iterable[SyntheticOwner]) -> Optional[SyntheticOwner]:
    """First record of `existing` that `candidate` duplicates, or None."""
    for owner in existing:
        if is_duplicate(candidate, owner):
            return owner
    return None


class DuplicateOracle:
    """Observes owner form outcomes through an OwnerPage."""

    def __init__(self, owner_page: "OwnerPage", message: str = DUPLICATE_OWNER_MESSAGE, timeout: int = 5000):
        self.owner_page = owner_page
        self.message = message
        self.timeout = timeout

    async def assert_rejected(self, submitted: SyntheticOwner) -> None:
        """Still on /owners/new, error shown, every submitted value retained."""
        page = self.owner_page
        with allure.step(f"Owner {submitted.full_name} rejected as duplicate"):
            check(page.is_on_creation_form(), f"Expected to stay on /owners/new, got {page.url}")
            await expect_visible(page.form_error(self.message), f"message {self.message!r}", self.timeout)
            for field_id, value in submitted.form_values().items():
                await expect_value(page.form_field(field_id), value, f"field {field_id}", self.timeout)
            logger.info(f"Duplicate rejected: {submitted.dedup_key()}")

    async def assert_created(self, owner: SyntheticOwner) -> int:
        """
        Details view of the new owner is shown.

        Returns:
            The new owner id from the URL
        """
        page = self.owner_page
        with allure.step(f"Owner {owner.full_name} created"):
            check(page.is_on_details_view(), f"Expected the owner details view, got {page.url}")
            await expect_visible(page.details_heading(), "Owner Information heading", self.timeout)
            await expect_visible(page.details_cell(owner.full_name), f"cell {owner.full_name!r}", self.timeout)
            check(
                await page.form_error(self.message).count() == 0,
                f"Duplicate message shown for a new owner {owner.full_name}",
            )
            owner_id = page.owner_id_from_url()
            logger.info(f"Owner created: id={owner_id} {owner.full_name}")
            return owner_id

    async def assert_no_phantom(self, last_name: str, expected_count: int) -> None:
        """Searching `last_name` returns exactly `expected_count` owners."""
        with allure.step(f"No phantom owner with last name {last_name}"):
            actual = await self.owner_page.count_search_results(last_name)
            check(
                actual == expected_count,
                f"Expected {expected_count} owner(s) named {last_name!r}, found {actual}",
            )


__all__ = [
    "is_duplicate",
    "find_duplicate",
    "DuplicateOracle",
]
