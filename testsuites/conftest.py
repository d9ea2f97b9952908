"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.
It registers common markers and adds directory-based markers.

================================================================================
"""

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests driving a real browser against the application"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: Browser tests (need the clinic application)"
    )
    config.addinivalue_line(
        "markers", "unit: Browser-free tests of the framework itself"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "owners: Owner search, creation and details"
    )
    config.addinivalue_line(
        "markers", "duplicates: Duplicate-owner prevention"
    )
    config.addinivalue_line(
        "markers", "export: CSV export"
    )
    config.addinivalue_line(
        "markers", "locale: Language selection and persistence"
    )
    config.addinivalue_line(
        "markers", "errors: Not-found and error views"
    )
    config.addinivalue_line(
        "markers", "visits: Visit scheduling and upcoming visits"
    )
    config.addinivalue_line(
        "markers", "navigation: Navbar and page routing"
    )

    # Session options
    config.addinivalue_line(
        "markers", "viewport(width, height): Run the browser test with another viewport"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Adds the 'ui' or 'unit' marker from the test's directory.
    """
    for item in items:
        path = str(item.fspath)
        # Auto-add 'ui' marker to tests in ui_testing directory
        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)

        # Auto-add 'unit' marker to tests in unit directory
        if "unit" in path.replace("\\", "/").split("/"):
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Clinic E2E Test Automation Framework",
        "=" * 60,
        "",
    ]
