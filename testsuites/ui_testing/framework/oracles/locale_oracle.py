"""
================================================================================
Locale Oracle
================================================================================

Checks that the display language selected through `lang=<code>`:
    - is offered by the navbar selector (fixed locale list, flag + name)
    - shows up in the URL and in translated strings once selected
    - is carried by every same-origin navigation and pagination link
    - survives reload and back-navigation
    - renders the same text after a reload as on a fresh load
    - falls back to the default locale for unknown codes, without an error

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import difflib
import re
from typing import TYPE_CHECKING, List, Optional, Sequence
from urllib.parse import urlsplit

import allure
from loguru import logger

from ..locale_context import (
    DEFAULT_LOCALE,
    SUPPORTED_LOCALES,
    TRANSLATION_SAMPLES,
    LocaleContext,
    LocaleOption,
    find_locale_leaks,
    lang_of,
)
from .base import check, expect_attribute, expect_visible

if TYPE_CHECKING:
    from ..page_base import BasePage


# Links that must echo the locale; the selector's own entries point elsewhere
LINK_SCOPE = ".navbar a.nav-link[href], .pagination a[href]"
_HREFS_OUTSIDE_SELECTOR = (
    "els => els.filter(e => !e.closest('.language-selector')).map(e => e.getAttribute('href'))"
)


class LocaleOracle:
    """
    Locale persistence checks against a page object.

    Usage:
        oracle = LocaleOracle()
        await home.language.select("de")
        await oracle.assert_switched_to(home, "de")
        await oracle.assert_links_carry_locale(home, "de")
    """

    def __init__(self, locales: Sequence[LocaleOption] = SUPPORTED_LOCALES, timeout: int = 5000):
        self.locales = tuple(locales)
        self.timeout = timeout

    @allure.step("Selector lists every supported locale")
    async def assert_selector_lists_locales(self, page_object: "BasePage") -> None:
        """Dropdown shows exactly the supported locales, in order, each with a decorative flag."""
        selector = page_object.language
        await expect_attribute(selector.button(), "aria-label", "Language selector", "language button")
        await selector.open_menu()

        codes = await selector.option_codes()
        expected = [option.code for option in self.locales]
        check(codes == expected, f"Language options {codes} differ from {expected}")

        for option in self.locales:
            entry = selector.option(option.code)
            await expect_visible(entry, f"{option.display_name} option", self.timeout)
            text = await entry.inner_text()
            check(option.display_name in text, f"Option {option.code} reads {text!r}, expected {option.display_name!r}")
            flag = entry.locator(selector.FLAG_SELECTOR)
            check(await flag.count() == 1, f"Option {option.code} has no aria-hidden flag glyph")
            flag_text = (await flag.text_content() or "").strip()
            check(flag_text == option.flag, f"Option {option.code} flag {flag_text!r} != {option.flag!r}")

        await selector.close_menu()

    async def assert_switched_to(self, page_object: "BasePage", code: str, check_active: bool = True) -> None:
        """URL, session state and (optionally) the active menu entry all report `code`."""
        with allure.step(f"Locale is {code}"):
            url_code = lang_of(page_object.url)
            check(url_code == code, f"URL {page_object.url} carries lang={url_code}, expected {code}")
            check(
                page_object.locale.code == code,
                f"Session locale is {page_object.locale.code}, expected {code}",
            )
            if check_active:
                await page_object.language.open_menu()
                active = await page_object.language.active_code()
                await page_object.language.close_menu()
                check(active == code, f"Active selector entry is {active!r}, expected {code!r}")

    async def assert_translated(self, page_object: "BasePage", code: str, sample: str, scope: str = "body") -> None:
        """
        The known translation `sample` of `code` is visible inside `scope`.

        Raises:
            KeyError: No such sample for the locale
        """
        text = TRANSLATION_SAMPLES[code][sample]
        with allure.step(f"'{text}' is shown for {code}"):
            locator = page_object.page.locator(scope).get_by_text(text, exact=False)
            await expect_visible(locator, f"{code} text {text!r} in {scope}", self.timeout)

    async def locale_leaks(self, page_object: "BasePage", code: str, scope: str = LINK_SCOPE) -> List[str]:
        hrefs = await page_object.page.locator(scope).evaluate_all(_HREFS_OUTSIDE_SELECTOR)
        return find_locale_leaks(hrefs, code, page_object.base_url)

    async def assert_links_carry_locale(self, page_object: "BasePage", code: str, scope: str = LINK_SCOPE) -> None:
        """Every same-origin link in `scope` carries lang=<code>."""
        with allure.step(f"Links carry lang={code}"):
            leaks = await self.locale_leaks(page_object, code, scope)
            check(not leaks, f"Links without lang={code}: {leaks}")

    async def assert_survives_reload(self, page_object: "BasePage", code: str) -> None:
        with allure.step(f"lang={code} survives reload"):
            await page_object.reload()
            check(lang_of(page_object.url) == code, f"After reload URL is {page_object.url}")
            await self.assert_links_carry_locale(page_object, code)

    async def assert_reload_matches_fresh(self, page_object: "BasePage", code: str) -> None:
        """
        Switch to `code` through the selector and reload. The visible text must
        equal what a fresh load of the same URL in `code` renders.
        """
        with allure.step(f"Reload in {code} renders like a fresh load"):
            await page_object.language.select(code)
            await page_object.reload()
            reloaded = await page_object.visible_text()

            parts = urlsplit(page_object.url)
            path = f"{parts.path}?{parts.query}" if parts.query else parts.path
            await page_object.open(path, locale=LocaleContext(code))
            fresh = await page_object.visible_text()

            diff = list(difflib.unified_diff(
                fresh.splitlines(), reloaded.splitlines(), "fresh", "reloaded", n=0, lineterm="",
            ))
            check(not diff, f"Reloaded {path} in {code} differs from a fresh load:\n" + "\n".join(diff[:20]))

    async def assert_survives_back(self, page_object: "BasePage", code: str) -> None:
        """Navigate forward through the navbar, go back, and expect the locale kept on both pages."""
        with allure.step(f"lang={code} survives back-navigation"):
            start_url = page_object.url
            await page_object.go_find_owners()
            check(lang_of(page_object.url) == code, f"Find Owners URL {page_object.url} lost lang={code}")
            await page_object.go_back()
            check(lang_of(page_object.url) == code, f"Back-navigation landed on {page_object.url}")
            check(
                page_object.url.split("?")[0] == start_url.split("?")[0],
                f"Back-navigation landed on {page_object.url}, expected {start_url}",
            )

    async def assert_fallback(self, page_object: "BasePage", invalid_code: str, path: Optional[str] = None) -> None:
        """
        Open `path` with an unsupported code: the page renders in the default
        locale, without an error view.
        """
        with allure.step(f"Unknown lang={invalid_code} falls back to {DEFAULT_LOCALE}"):
            await page_object.open(path, locale=LocaleContext(invalid_code))
            check(
                page_object.locale.effective == DEFAULT_LOCALE,
                f"Expected effective locale {DEFAULT_LOCALE}, got {page_object.locale.effective}",
            )
            await expect_visible(page_object.heading(), "page heading", self.timeout)
            error_heading = page_object.page.get_by_role("heading", name=re.compile(r"something happened|error", re.I))
            check(await error_heading.count() == 0, f"lang={invalid_code} rendered an error page")
            await self.assert_translated(page_object, DEFAULT_LOCALE, "home", scope=".navbar")
            logger.info(f"lang={invalid_code} rendered with default locale")


__all__ = [
    "LocaleOracle",
    "LINK_SCOPE",
]
