"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the clinic application.

Each page class encapsulates:
    - Element locators
    - Page-specific actions (navigate or raise, never assert)
    - Read-only state queries used by tests and oracles

Author: Automation Team
License: MIT
================================================================================
"""

from .home_page import HomePage
from .owner_page import OwnerPage
from .vet_page import VetPage
from .not_found_page import NotFoundPage
from .visit_page import UpcomingVisitsPage, VisitFormPage

__all__ = [
    "HomePage",
    "OwnerPage",
    "VetPage",
    "NotFoundPage",
    "UpcomingVisitsPage",
    "VisitFormPage",
]
