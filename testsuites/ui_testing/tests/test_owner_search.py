"""
================================================================================
Owner Search UI Tests
================================================================================

Covers the search routing of the owner screen:
  - several matches render the list
  - a single match redirects to the owner details
  - no match re-renders the form with a message
  - an empty search lists every owner

================================================================================
"""

import allure
import pytest
from playwright.async_api import expect

from testsuites.ui_testing.framework.reference_data import (
    MULTI_MATCH_LAST_NAME,
    OWNER_COUNT_BY_LAST_NAME,
    SINGLE_MATCH_LAST_NAME,
)
from testsuites.ui_testing.pages import OwnerPage


@allure.epic("UI Testing")
@allure.feature("Owners")
@pytest.mark.e2e
@pytest.mark.owners
class TestOwnerSearch:
    """Owner search and details."""

    @allure.story("Search")
    @allure.title("Search with several matches lists them and opens details")
    @allure.severity(allure.severity_level.BLOCKER)
    @pytest.mark.P0
    @pytest.mark.smoke
    async def test_search_multiple_matches(self, owner_page: OwnerPage):
        await owner_page.open_find_owners()
        await owner_page.search_by_last_name(MULTI_MATCH_LAST_NAME)

        await expect(owner_page.owners_table()).to_be_visible()
        await expect(owner_page.owner_rows()).to_have_count(OWNER_COUNT_BY_LAST_NAME[MULTI_MATCH_LAST_NAME])

        await owner_page.open_owner_details_by_name("Betty Davis")
        await expect(owner_page.details_heading()).to_be_visible()
        assert owner_page.owner_id_from_url() is not None
        await owner_page.screenshot("owner-details")

    @allure.story("Search")
    @allure.title("Search with one match redirects to the owner details")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    async def test_search_single_match_redirects(self, owner_page: OwnerPage):
        await owner_page.open_find_owners()
        await owner_page.search_by_last_name(SINGLE_MATCH_LAST_NAME)

        assert owner_page.is_on_details_view(), owner_page.url
        await expect(owner_page.details_heading()).to_be_visible()
        await expect(owner_page.details_cell("George Franklin")).to_be_visible()

    @allure.story("Search")
    @allure.title("Search without matches stays on the form with a message")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    async def test_search_no_match(self, owner_page: OwnerPage, data_factory):
        unknown = data_factory.create_owner().last_name

        await owner_page.open_find_owners()
        await owner_page.search_by_last_name(unknown)

        await expect(owner_page.not_found_message()).to_be_visible()
        assert await owner_page.owner_rows().count() == 0

    @allure.story("Search")
    @allure.title("Empty search lists every owner with pagination")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    async def test_empty_search_lists_all(self, owner_page: OwnerPage):
        await owner_page.open_find_owners()
        await owner_page.search_by_last_name("")

        await expect(owner_page.owners_table()).to_be_visible()
        assert 0 < await owner_page.owner_rows().count() <= owner_page.PAGE_SIZE
        assert await owner_page.pagination_links().count() > 0

    @allure.story("Search")
    @allure.title("Result count for a seeded last name")
    @allure.severity(allure.severity_level.MINOR)
    @pytest.mark.P2
    async def test_count_search_results(self, owner_page: OwnerPage):
        for last_name in (MULTI_MATCH_LAST_NAME, SINGLE_MATCH_LAST_NAME):
            count = await owner_page.count_search_results(last_name)
            assert count == OWNER_COUNT_BY_LAST_NAME[last_name], last_name
