"""
================================================================================
Smart Locator
================================================================================

Element location with ordered selector strategies:
    - One named entry per clinic UI element, several selectors per entry
    - Falls through to the next selector when the preferred one is absent
    - Records which elements needed a fallback (selector maintenance report)

Scenario code and page objects refer to elements by name, so selector churn
in the application is absorbed here.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from loguru import logger
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .errors import LocatorNotFound


@dataclass
class LocatorHealth:
    """
    Tracks which selector resolved an element.

    Attributes:
        element_name: Human-readable element name
        primary_selector: The preferred selector
        used_fallback: Whether a fallback was used
        fallback_name: Name of fallback used (if any)
        fallback_selector: The fallback selector used (if any)
    """
    element_name: str
    primary_selector: str
    used_fallback: bool = False
    fallback_name: Optional[str] = None
    fallback_selector: Optional[str] = None


class SmartLocator:
    """
    Named element locator with fallback strategies.

    Locator Priority Order:
        1. id / data-testid (most stable)
        2. aria-label or href (structural)
        3. Visible text (locale dependent, last resort)

    Usage:
        >>> smart = SmartLocator(page)
        >>> await smart.click("nav_find_owners")
        >>> await smart.fill("owner_last_name_input", "Davis")
    """

    # Format: element_name -> {strategy_name: selector}
    LOCATORS: Dict[str, Dict[str, str]] = {
        # Navigation bar (hrefs may carry ?lang=...)
        "nav_home": {
            "primary": ".navbar a.nav-link[href='/'], .navbar a.nav-link[href^='/?']",
            "fallback_1": ".navbar a[title='home page']",
        },
        "nav_find_owners": {
            "primary": ".navbar a.nav-link[href^='/owners/find']",
            "fallback_1": ".navbar a[href*='owners/find']",
        },
        "nav_veterinarians": {
            "primary": ".navbar a.nav-link[href^='/vets.html']",
            "fallback_1": ".navbar a[href*='vets']",
        },
        "nav_upcoming_visits": {
            "primary": ".navbar a.nav-link[href^='/visits/upcoming']",
            "fallback_1": ".navbar a[href*='visits/upcoming']",
        },
        "brand_text": {
            "primary": ".navbar-brand-text",
            "fallback_1": ".navbar-brand",
        },

        # Language selector
        "language_button": {
            "primary": "#languageDropdown",
            "fallback_1": "[aria-label='Language selector']",
        },
        "language_menu": {
            "primary": ".language-selector .dropdown-menu",
            "fallback_1": "[aria-labelledby='languageDropdown']",
        },

        # Landing page
        "hero": {
            "primary": "[data-testid='liatrio-hero']",
            "fallback_1": ".liatrio-hero",
            "fallback_2": "main h1",
        },

        # Owner search
        "owner_last_name_input": {
            "primary": "#lastName",
            "fallback_1": "input[name='lastName']",
        },
        "find_owner_button": {
            "primary": "#search-owner-form button[type='submit']",
            "fallback_1": "form button[type='submit']",
        },
        "add_owner_link": {
            "primary": "a[href^='/owners/new']",
            "fallback_1": "a[href*='owners/new']",
        },
        "export_csv_link": {
            "primary": "a[href*='owners.csv']",
            "fallback_1": "a:has-text('Export to CSV')",
        },

        # Owner form
        "owner_form_submit": {
            "primary": "#add-owner-form button[type='submit']",
            "fallback_1": "form button[type='submit']",
        },

        # Not-found page
        "not_found_find_owners": {
            "primary": "a.btn.btn-primary[href*='/owners/find']",
            "fallback_1": "a.btn.btn-primary:has-text('Find Owners')",
        },

        # Visits
        "apply_filters_button": {
            "primary": "button[type='submit']:has-text('Apply Filters')",
            "fallback_1": "form button[type='submit']",
        },
        "clear_filters_link": {
            "primary": "main a:has-text('Clear Filters')",
            "fallback_1": "a.btn[href$='/visits/upcoming']",
        },
        "visit_form_submit": {
            "primary": "form button[type='submit']",
            "fallback_1": "button:has-text('Add Visit')",
        },
    }

    def __init__(
        self,
        page: Page,
        element_name: Optional[str] = None,
        locators: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize SmartLocator with Playwright page.

        Two usage styles:
        1) **Library mode**: `SmartLocator(page)` then `await smart.click("nav_home")`
           using the class-level `LOCATORS` map.
        2) **Element mode**: `SmartLocator(page, element_name="X", locators={...})`
           then `await element.locate()` to resolve a single element.

        Args:
            page: Playwright Page object
            element_name: Optional human-readable element name (element mode)
            locators: Optional locator map (element mode)
        """
        self.page = page
        self._element_name = element_name
        self._element_locators = locators
        self._fallback_used: Dict[str, LocatorHealth] = {}

    async def locate(
        self,
        target: Optional[Union[str, Dict[str, str]]] = None,
        timeout: int = 5000,
        element_name: Optional[str] = None,
        state: str = "visible",
    ) -> Locator:
        """
        Locate element using ordered selector strategies.

        Tries each strategy in order until one reaches `state`.

        Args:
            target: Element key (str) from `LOCATORS`, a locator map (dict),
                or None to use the instance's stored map (element mode).
            timeout: Timeout in milliseconds for each attempt
            element_name: Human-readable name when `target` is a dict
            state: Element state to wait for ('visible', 'attached')

        Returns:
            Playwright Locator for the found element

        Raises:
            LocatorNotFound: When all strategies fail
        """
        if isinstance(target, dict):
            locators = target
            display_name = element_name or self._element_name or "custom_element"
        elif isinstance(target, str):
            locators = self.LOCATORS.get(target, {})
            display_name = target
        else:
            locators = self._element_locators or {}
            display_name = element_name or self._element_name or "custom_element"

        if not locators:
            raise LocatorNotFound(f"No locators defined for element: {display_name}")

        errors = []

        for strategy_name, selector in locators.items():
            locator = self.page.locator(selector).first
            try:
                await locator.wait_for(state=state, timeout=timeout)
            except PlaywrightTimeoutError as e:
                errors.append(f"{strategy_name}: {selector} -> {str(e).splitlines()[0][:80]}")
                continue

            used_fallback = strategy_name != "primary"
            health = LocatorHealth(
                element_name=display_name,
                primary_selector=locators.get("primary", selector),
                used_fallback=used_fallback,
                fallback_name=strategy_name if used_fallback else None,
                fallback_selector=selector if used_fallback else None,
            )
            if used_fallback:
                logger.warning(
                    f"Element '{display_name}' used fallback: {strategy_name} -> {selector}"
                )
                self._fallback_used[display_name] = health
            else:
                logger.debug(f"Element '{display_name}' found: {selector}")

            return locator

        error_msg = (
            f"All locators failed for '{display_name}':\n" +
            "\n".join(f"  - {err}" for err in errors)
        )
        logger.error(error_msg)
        raise LocatorNotFound(error_msg)

    async def click(
        self,
        target: Union[str, Dict[str, str]],
        timeout: int = 5000,
        element_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """Click element using smart location."""
        locator = await self.locate(target, timeout=timeout, element_name=element_name)
        await locator.click(**kwargs)

    async def fill(
        self,
        target: Union[str, Dict[str, str]],
        value: str,
        timeout: int = 5000,
        element_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """Fill input element using smart location."""
        locator = await self.locate(target, timeout=timeout, element_name=element_name)
        await locator.fill(value, **kwargs)

    async def is_visible(
        self,
        target: Union[str, Dict[str, str]],
        timeout: int = 2000,
        element_name: Optional[str] = None,
    ) -> bool:
        """
        Check if element is visible.

        Returns:
            True if element is visible, False otherwise
        """
        try:
            locator = await self.locate(target, timeout=timeout, element_name=element_name)
        except LocatorNotFound:
            return False
        return await locator.is_visible()

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Lists elements that needed a fallback selector (maintenance candidates).
        """
        if not self._fallback_used:
            return "All elements used primary locators. No maintenance needed."

        report_lines = [
            "Locator Health Report - Fallbacks Used:",
            "",
            "The following elements used fallback locators.",
            "Consider updating the primary selectors:",
            "",
        ]

        for element_name, health in self._fallback_used.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_selector}",
                f"    Used: {health.fallback_name} -> {health.fallback_selector}",
                "",
            ])

        return "\n".join(report_lines)

    @property
    def used_fallbacks(self) -> bool:
        return bool(self._fallback_used)


__all__ = [
    "SmartLocator",
    "LocatorHealth",
]
