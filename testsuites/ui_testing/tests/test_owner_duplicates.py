"""
================================================================================
Owner Duplicate Prevention UI Tests
================================================================================

Rule under test: first name + last name (case-insensitive) + telephone
identify an owner. Address and city do not.

Every test except the literal John Doe scenario works with factory owners,
so reruns against the same database do not collide.

================================================================================
"""

import allure
import pytest
from loguru import logger

from testsuites.ui_testing.framework.data_factory import TestDataFactory
from testsuites.ui_testing.framework.oracles import DuplicateOracle, is_duplicate
from testsuites.ui_testing.pages import OwnerPage


@allure.epic("UI Testing")
@allure.feature("Owners")
@allure.story("Duplicate Prevention")
@pytest.mark.e2e
@pytest.mark.owners
@pytest.mark.duplicates
class TestOwnerDuplicates:
    """Duplicate-owner prevention."""

    @allure.title("Exact duplicate (John Doe) is rejected and the form keeps its values")
    @allure.severity(allure.severity_level.BLOCKER)
    @pytest.mark.P0
    @pytest.mark.smoke
    async def test_exact_duplicate_rejected(
        self,
        owner_page: OwnerPage,
        duplicate_oracle: DuplicateOracle,
        data_factory: TestDataFactory,
    ):
        owner = data_factory.create_owner(
            first_name="John",
            last_name="Doe",
            address="123 Main St",
            city="Springfield",
            telephone="5551234567",
        )

        with allure.step("Create the first John Doe"):
            await owner_page.create_owner(owner)
            if owner_page.is_on_creation_form():
                # Left over from an earlier run against the same database
                await duplicate_oracle.assert_rejected(owner)
                logger.info("John Doe already existed; continuing with the duplicate submission")
            else:
                await duplicate_oracle.assert_created(owner)

        duplicate = owner.with_changes(address="456 Elm St", city="Different City")
        assert is_duplicate(duplicate, owner)

        with allure.step("Submit the same owner with another address"):
            await owner_page.create_owner(duplicate)
            await duplicate_oracle.assert_rejected(duplicate)
            await owner_page.screenshot("duplicate-error-displayed")

    @allure.title("Names differing only in case are still duplicates")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    async def test_case_insensitive_duplicate(
        self,
        owner_page: OwnerPage,
        duplicate_oracle: DuplicateOracle,
        data_factory: TestDataFactory,
    ):
        owner = data_factory.create_owner()
        await owner_page.create_owner(owner)
        await duplicate_oracle.assert_created(owner)

        variant = data_factory.owner.create_duplicate_of(owner).with_changes(
            first_name=owner.first_name.lower(),
            last_name=owner.last_name.upper(),
        )
        assert is_duplicate(variant, owner)

        await owner_page.create_owner(variant)
        await duplicate_oracle.assert_rejected(variant)

    @allure.title("A different telephone makes a new owner")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P1
    async def test_different_telephone_allowed(
        self,
        owner_page: OwnerPage,
        duplicate_oracle: DuplicateOracle,
        data_factory: TestDataFactory,
    ):
        owner = data_factory.create_owner()
        await owner_page.create_owner(owner)
        first_id = await duplicate_oracle.assert_created(owner)

        sibling = owner.with_changes(telephone=data_factory.uniqueness.next_telephone())
        assert not is_duplicate(sibling, owner)

        await owner_page.create_owner(sibling)
        second_id = await duplicate_oracle.assert_created(sibling)
        assert second_id != first_id

    @allure.title("A different first name makes a new owner")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    async def test_different_name_allowed(
        self,
        owner_page: OwnerPage,
        duplicate_oracle: DuplicateOracle,
        data_factory: TestDataFactory,
    ):
        owner = data_factory.create_owner()
        await owner_page.create_owner(owner)
        await duplicate_oracle.assert_created(owner)

        namesake = owner.with_changes(first_name=f"{owner.first_name}x")
        assert not is_duplicate(namesake, owner)

        await owner_page.create_owner(namesake)
        await duplicate_oracle.assert_created(namesake)

    @allure.title("A rejected duplicate leaves no extra record")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    async def test_no_phantom_record(
        self,
        owner_page: OwnerPage,
        duplicate_oracle: DuplicateOracle,
        data_factory: TestDataFactory,
    ):
        owner = data_factory.create_owner()
        await owner_page.create_owner(owner)
        await duplicate_oracle.assert_created(owner)
        count_before = await owner_page.count_search_results(owner.last_name)
        assert count_before == 1

        duplicate = data_factory.owner.create_duplicate_of(owner)
        await owner_page.create_owner(duplicate)
        await duplicate_oracle.assert_rejected(duplicate)

        await duplicate_oracle.assert_no_phantom(owner.last_name, count_before)
