from testsuites.ui_testing.framework.data_factory import SyntheticOwner
from testsuites.ui_testing.framework.oracles.duplicate_oracle import find_duplicate, is_duplicate


JOHN = SyntheticOwner("John", "Doe", "123 Main St", "Springfield", "5551234567")


def test_same_key_with_other_address_and_city_is_duplicate():
    assert is_duplicate(JOHN.with_changes(address="9 Side Rd", city="Shelbyville"), JOHN)


def test_names_compare_trimmed_and_case_insensitive():
    assert is_duplicate(JOHN.with_changes(first_name=" JOHN ", last_name="doe"), JOHN)


def test_telephone_ignores_spaces_and_dashes():
    assert is_duplicate(JOHN.with_changes(telephone="555-123 4567"), JOHN)


def test_any_key_field_difference_is_not_duplicate():
    assert not is_duplicate(JOHN.with_changes(telephone="5559999999"), JOHN)
    assert not is_duplicate(JOHN.with_changes(first_name="Jon"), JOHN)
    assert not is_duplicate(JOHN.with_changes(last_name="Does"), JOHN)


def test_find_duplicate():
    jane = SyntheticOwner("Jane", "Doe", "123 Main St", "Springfield", "5551234567")
    candidate = JOHN.with_changes(city="Capital City")

    assert find_duplicate(candidate, [jane, JOHN]) is JOHN
    assert find_duplicate(jane.with_changes(telephone="1"), [jane, JOHN]) is None
    assert find_duplicate(candidate, []) is None
