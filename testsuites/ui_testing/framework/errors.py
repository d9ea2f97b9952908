"""
================================================================================
Framework Errors
================================================================================

Failure taxonomy for the clinic E2E framework.

    - NavigationTimeout: a navigation, network-idle or URL wait ran out of time
    - DownloadTimeout: an armed download never produced a file
    - LocatorNotFound: an expected element was absent after every selector
    - AssertionFailure: an oracle observed state that breaks a business rule

Page objects translate Playwright timeouts into these types at their boundary
and re-raise; nothing here is retried.

================================================================================
"""

from __future__ import annotations


class FrameworkError(Exception):
    """Base class for framework-level (non-assertion) failures."""
    pass


class NavigationTimeout(FrameworkError):
    """Raised when a page never reached the expected URL or load state."""
    pass


class DownloadTimeout(FrameworkError):
    """Raised when an armed download event did not fire in time."""
    pass


class LocatorNotFound(FrameworkError):
    """Raised when all locator strategies fail to find an element."""
    pass


class AssertionFailure(AssertionError):
    """
    Raised by oracles when observed state mismatches the expected rule.

    Subclasses AssertionError so pytest reports it as a test failure with
    assertion introspection output.
    """
    pass


__all__ = [
    "FrameworkError",
    "NavigationTimeout",
    "DownloadTimeout",
    "LocatorNotFound",
    "AssertionFailure",
]
