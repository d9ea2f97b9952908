"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for browser tests against the clinic application.

Key Features:
- One browser + one isolated session per test (safe under pytest-xdist)
- Failure artifacts (screenshot, trace, URL) written when the test fails
- Page Object and Oracle fixtures
- Process-wide uniqueness source for synthetic data
- Tests skip when the application is not reachable

================================================================================
"""

from typing import AsyncGenerator

import httpx
import pytest
from loguru import logger

from testsuites.ui_testing.framework.browser_manager import (
    BrowserManager,
    BrowserSession,
    SessionConfig,
)
from testsuites.ui_testing.framework.data_factory import TestDataFactory, UniquenessSource
from testsuites.ui_testing.framework.downloads import DownloadCapture
from testsuites.ui_testing.framework.oracles import (
    CsvExportOracle,
    DuplicateOracle,
    LocaleOracle,
    NotFoundOracle,
)
from testsuites.ui_testing.pages import (
    HomePage,
    NotFoundPage,
    OwnerPage,
    UpcomingVisitsPage,
    VetPage,
    VisitFormPage,
)


# ================================================================================
# Reporting Hooks
# ================================================================================

@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase's report as item.rep_<phase> for fixtures."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


# ================================================================================
# Configuration Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def session_config(pytestconfig) -> SessionConfig:
    """Session options from config/config.yaml, env and command line."""
    return SessionConfig.from_loader(
        base_url=(pytestconfig.getoption("--ui-base-url") or "").rstrip("/") or None,
        browser_type=pytestconfig.getoption("--ui-browser"),
        headless=False if pytestconfig.getoption("--ui-headed") else None,
    )


@pytest.fixture(scope="session")
def app_available(session_config: SessionConfig) -> bool:
    """Check once per worker that the application answers."""
    try:
        response = httpx.get(session_config.base_url, timeout=5.0, follow_redirects=True)
    except httpx.HTTPError as e:
        logger.warning(f"Clinic application not reachable at {session_config.base_url}: {e}")
        return False
    return response.status_code < 500


@pytest.fixture(autouse=True)
def _require_app(app_available: bool, session_config: SessionConfig) -> None:
    """Skip browser tests when the application is down."""
    if not app_available:
        pytest.skip(f"Clinic application not reachable at {session_config.base_url}")


# ================================================================================
# Test Data Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def uniqueness_source() -> UniquenessSource:
    """One uniqueness source per worker process."""
    return UniquenessSource()


@pytest.fixture
def data_factory(uniqueness_source: UniquenessSource) -> TestDataFactory:
    return TestDataFactory(uniqueness_source)


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture
async def browser_manager(session_config: SessionConfig) -> AsyncGenerator[BrowserManager, None]:
    """Browser process for one test (event loops are function-scoped)."""
    async with BrowserManager(session_config) as manager:
        yield manager


@pytest.fixture
async def browser_session(
    request,
    browser_manager: BrowserManager,
    session_config: SessionConfig,
) -> AsyncGenerator[BrowserSession, None]:
    """
    Isolated context + page for the current test.

    A test can request another viewport with `@pytest.mark.viewport(375, 667)`.
    """
    config = session_config
    marker = request.node.get_closest_marker("viewport")
    if marker is not None:
        config = session_config.with_viewport(*marker.args)

    async with browser_manager.session(request.node.nodeid, config) as session:
        yield session
        report = getattr(request.node, "rep_call", None)
        if report is not None and report.failed:
            session.mark_failed()


@pytest.fixture
def page(browser_session: BrowserSession):
    """Raw Playwright page of the session."""
    return browser_session.page


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def home_page(browser_session: BrowserSession) -> HomePage:
    return HomePage(browser_session)


@pytest.fixture
def owner_page(browser_session: BrowserSession) -> OwnerPage:
    return OwnerPage(browser_session)


@pytest.fixture
def vet_page(browser_session: BrowserSession) -> VetPage:
    return VetPage(browser_session)


@pytest.fixture
def not_found_page(browser_session: BrowserSession) -> NotFoundPage:
    return NotFoundPage(browser_session)


@pytest.fixture
def upcoming_visits_page(browser_session: BrowserSession) -> UpcomingVisitsPage:
    return UpcomingVisitsPage(browser_session)


@pytest.fixture
def visit_form_page(browser_session: BrowserSession) -> VisitFormPage:
    return VisitFormPage(browser_session)


# ================================================================================
# Oracle Fixtures
# ================================================================================

@pytest.fixture
def download_capture(browser_session: BrowserSession) -> DownloadCapture:
    return DownloadCapture(
        browser_session.page,
        browser_session.output_dir,
        timeout_ms=browser_session.config.download_timeout_ms,
    )


@pytest.fixture
def csv_oracle(download_capture: DownloadCapture) -> CsvExportOracle:
    return CsvExportOracle(download_capture)


@pytest.fixture
def locale_oracle(session_config: SessionConfig) -> LocaleOracle:
    return LocaleOracle(timeout=session_config.element_timeout_ms)


@pytest.fixture
def duplicate_oracle(owner_page: OwnerPage, session_config: SessionConfig) -> DuplicateOracle:
    return DuplicateOracle(owner_page, timeout=session_config.element_timeout_ms)


@pytest.fixture
def not_found_oracle(session_config: SessionConfig) -> NotFoundOracle:
    return NotFoundOracle(timeout=session_config.element_timeout_ms)
