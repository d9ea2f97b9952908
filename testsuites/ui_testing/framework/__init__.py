"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based end-to-end framework for the clinic application.

Components:
    - browser_manager: Browser lifecycle and per-test sessions with failure artifacts
    - page_base: Base page object with locale-preserving navigation
    - smart_locator: Named element location with fallback strategies
    - locale_context: `lang` query state and link building
    - data_factory: Synthetic owners and visits with a shared uniqueness source
    - downloads: Two-phase download capture
    - oracles: Business invariants as assertions
    - errors: Failure taxonomy

Author: Automation Team
License: MIT
================================================================================
"""

from .errors import (
    AssertionFailure,
    DownloadTimeout,
    FrameworkError,
    LocatorNotFound,
    NavigationTimeout,
)
from .smart_locator import SmartLocator
from .browser_manager import BrowserManager, BrowserSession, SessionConfig
from .page_base import BasePage
from .locale_context import LocaleContext, with_locale
from .data_factory import TestDataFactory, UniquenessSource
from .downloads import DownloadArtifact, DownloadCapture

__all__ = [
    "AssertionFailure",
    "DownloadTimeout",
    "FrameworkError",
    "LocatorNotFound",
    "NavigationTimeout",
    "SmartLocator",
    "BrowserManager",
    "BrowserSession",
    "SessionConfig",
    "BasePage",
    "LocaleContext",
    "with_locale",
    "TestDataFactory",
    "UniquenessSource",
    "DownloadArtifact",
    "DownloadCapture",
]
