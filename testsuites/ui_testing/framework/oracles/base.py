"""
Shared helpers for oracles: turn Playwright expectation failures and plain
checks into AssertionFailure.
"""

from __future__ import annotations

from typing import Pattern, Union

from playwright.async_api import Locator, expect

from ..errors import AssertionFailure


def check(condition: bool, message: str) -> None:
    """Raise AssertionFailure with `message` unless `condition` holds."""
    if not condition:
        raise AssertionFailure(message)


async def expect_visible(locator: Locator, description: str, timeout: int = 5000) -> None:
    try:
        await expect(locator.first).to_be_visible(timeout=timeout)
    except AssertionError as e:
        raise AssertionFailure(f"Expected {description} to be visible") from e


async def expect_attribute(
    locator: Locator,
    name: str,
    value: Union[str, Pattern[str]],
    description: str,
    timeout: int = 5000,
) -> None:
    try:
        await expect(locator.first).to_have_attribute(name, value, timeout=timeout)
    except AssertionError as e:
        raise AssertionFailure(f"Expected {description} to have {name}={value!r}") from e


async def expect_value(locator: Locator, value: str, description: str, timeout: int = 5000) -> None:
    try:
        await expect(locator).to_have_value(value, timeout=timeout)
    except AssertionError as e:
        actual = await locator.input_value()
        raise AssertionFailure(f"Expected {description} to be {value!r}, got {actual!r}") from e


__all__ = [
    "check",
    "expect_visible",
    "expect_attribute",
    "expect_value",
]
