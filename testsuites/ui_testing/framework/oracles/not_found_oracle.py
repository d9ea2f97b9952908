"""
================================================================================
Not-Found Oracle
================================================================================

A missing owner or pet must render the branded "couldn't find ..." view:
heading, resource-specific message, a primary "Find Owners" link back to
/owners/find, and no internal detail (exception names, stack traces, source
package prefixes) anywhere in the visible text.

Leak patterns come from `oracles.not_found.leak_patterns` in config.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterable, List, Optional, Pattern, Sequence

import allure
from loguru import logger

from ..config_loader import ConfigLoader
from .base import check, expect_attribute, expect_visible

if TYPE_CHECKING:
    from testsuites.ui_testing.pages.not_found_page import NotFoundPage


DEFAULT_LEAK_PATTERNS = ("exception", "stack trace", r"java\.")
NOT_FOUND_STATUS = 404


def compile_leak_patterns(patterns: Iterable[str]) -> List[Pattern[str]]:
    return [re.compile(pattern, re.I) for pattern in patterns]


def leak_patterns_from_config(config: Optional[ConfigLoader] = None) -> List[Pattern[str]]:
    config = config or ConfigLoader()
    patterns = config.get("oracles.not_found.leak_patterns", list(DEFAULT_LEAK_PATTERNS))
    return compile_leak_patterns(patterns or DEFAULT_LEAK_PATTERNS)


def find_leaks(text: str, patterns: Sequence[Pattern[str]]) -> List[str]:
    """Snippets of `text` around each leak pattern match."""
    found: List[str] = []
    for pattern in patterns:
        for match in pattern.finditer(text):
            start, end = max(match.start() - 20, 0), min(match.end() + 20, len(text))
            found.append(text[start:end].replace("\n", " "))
    return found


class NotFoundOracle:
    """Graceful-404 checks."""

    def __init__(self, patterns: Optional[Sequence[Pattern[str]]] = None, timeout: int = 5000):
        self.patterns = list(patterns) if patterns is not None else leak_patterns_from_config()
        self.timeout = timeout

    async def assert_graceful_not_found(self, page: "NotFoundPage", message: str) -> None:
        """
        Args:
            page: NotFoundPage after open_missing_owner()/open_missing_pet()
            message: Resource-specific text, e.g. "couldn't find that owner"
        """
        with allure.step(f"Graceful not-found view: {message}"):
            if page.status is not None:
                check(page.status == NOT_FOUND_STATUS, f"Expected HTTP 404, got {page.status}")

            await expect_visible(page.heading(), "couldn't-find heading", self.timeout)
            await expect_visible(page.message(message), f"message {message!r}", self.timeout)
            await expect_visible(page.find_owners_button(), "Find Owners button", self.timeout)
            await expect_attribute(
                page.find_owners_button(),
                "href",
                re.compile(r"/owners/find"),
                "Find Owners button",
                self.timeout,
            )

            leaks = find_leaks(await page.visible_text(), self.patterns)
            check(not leaks, f"Not-found view leaks internal detail: {leaks}")
            logger.info(f"Not-found view OK at {page.url}")

    async def assert_branded_layout(self, page: "NotFoundPage") -> None:
        with allure.step("Not-found view uses the branded layout"):
            await expect_visible(page.error_section(), "error section", self.timeout)
            await expect_visible(page.error_card(), "error card", self.timeout)


__all__ = [
    "DEFAULT_LEAK_PATTERNS",
    "NOT_FOUND_STATUS",
    "NotFoundOracle",
    "compile_leak_patterns",
    "leak_patterns_from_config",
    "find_leaks",
]
