"""
================================================================================
Navigation and Landing Page UI Tests
================================================================================

Covers:
  - Home page hero, branding and feature cards
  - Navbar routing between Home, Find Owners, Veterinarians and Upcoming Visits
  - Mobile viewport rendering

================================================================================
"""

import re

import allure
import pytest
from playwright.async_api import expect

from testsuites.ui_testing.framework.reference_data import BRAND_TEXT
from testsuites.ui_testing.pages import HomePage, OwnerPage, UpcomingVisitsPage, VetPage


@allure.epic("UI Testing")
@allure.feature("Navigation")
@pytest.mark.e2e
@pytest.mark.navigation
class TestNavigation:
    """Landing page and navbar routing."""

    @allure.story("Landing Page")
    @allure.title("Home page shows hero, brand and feature cards")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    @pytest.mark.smoke
    async def test_home_page_landmarks(self, home_page: HomePage):
        await home_page.open_home()

        await expect(home_page.hero()).to_be_visible()
        await expect(home_page.heading()).to_contain_text("Care made modern")
        await expect(home_page.brand()).to_contain_text(BRAND_TEXT)
        await expect(home_page.feature_cards()).to_have_count(3)

    @allure.story("Navbar")
    @allure.title("Navbar links route to the expected pages")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    async def test_navbar_routes(self, home_page: HomePage, owner_page: OwnerPage, vet_page: VetPage):
        await home_page.open_home()

        with allure.step("Find Owners"):
            await home_page.go_find_owners()
            await expect(owner_page.heading()).to_have_text(re.compile("Find Owners", re.I))

        with allure.step("Veterinarians"):
            await owner_page.go_veterinarians()
            await expect(vet_page.heading()).to_be_visible()
            await expect(vet_page.vets_table()).to_be_visible()

        with allure.step("Home"):
            await vet_page.go_home()
            await expect(home_page.page).to_have_url(re.compile(r"/(\?.*)?$"))
            await expect(home_page.hero()).to_be_visible()

    @allure.story("Navbar")
    @allure.title("Upcoming Visits is reachable from the navbar")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    async def test_navbar_upcoming_visits(self, home_page: HomePage, upcoming_visits_page: UpcomingVisitsPage):
        await home_page.open_home()
        await home_page.go_upcoming_visits()

        await expect(upcoming_visits_page.page).to_have_url(re.compile(r"/visits/upcoming"))
        await expect(upcoming_visits_page.heading()).to_contain_text("Upcoming Visits")

    @allure.story("Veterinarians")
    @allure.title("Veterinarian table lists the clinic's vets")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    async def test_vets_table(self, vet_page: VetPage):
        await vet_page.open()

        await expect(vet_page.vets_table()).to_be_visible()
        names = await vet_page.vet_names()
        assert names, "Expected at least one veterinarian"

    @allure.story("Responsive")
    @allure.title("Home page renders on a mobile viewport")
    @allure.severity(allure.severity_level.MINOR)
    @pytest.mark.P2
    @pytest.mark.viewport(375, 667)
    async def test_mobile_viewport(self, home_page: HomePage):
        await home_page.open_home()

        assert home_page.page.viewport_size == {"width": 375, "height": 667}
        await expect(home_page.hero()).to_be_visible()
        await home_page.screenshot("home-mobile")
