"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for the clinic E2E suite.

Features:
    - One browser process per manager, one isolated context + page per session
    - Guaranteed release of the context on every exit path
    - Failure artifacts (screenshot, trace, URL, locator report) per test
    - Bounded default timeouts for navigation and element waits

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from clinic_tools.common import ensure_directory, safe_filename
from clinic_tools.report_tools.allure_utils import attach_file, attach_text

from .config_loader import ConfigLoader
from .locale_context import LocaleContext


# ================================================================================
# Session Configuration
# ================================================================================

@dataclass(frozen=True)
class SessionConfig:
    """
    Options recognized by the session fixture.

    Attributes:
        base_url: Origin prefix for relative navigation
        viewport: {"width": int, "height": int}
        record_artifacts_on_failure: Capture screenshot + trace when a test fails
        browser_type: 'chromium', 'firefox' or 'webkit'
        headless: Run the browser without a window
        navigation_timeout_ms: Bound for goto / load-state / URL waits
        element_timeout_ms: Bound for element waits and actions
        download_timeout_ms: Bound for download events
        artifacts_dir: Root of the per-test output directories
    """
    base_url: str = "http://localhost:8080"
    viewport: Dict[str, int] = field(default_factory=lambda: {"width": 1280, "height": 720})
    record_artifacts_on_failure: bool = True
    browser_type: str = "chromium"
    headless: bool = True
    navigation_timeout_ms: int = 15000
    element_timeout_ms: int = 5000
    download_timeout_ms: int = 15000
    artifacts_dir: Path = Path("test-results")

    @classmethod
    def from_loader(cls, config: Optional[ConfigLoader] = None, **overrides: Any) -> "SessionConfig":
        """
        Build session options from the YAML/env configuration.

        Args:
            config: ConfigLoader instance (defaults to the process singleton)
            **overrides: Field values that win over configuration (CLI options)
        """
        config = config or ConfigLoader()
        values: Dict[str, Any] = {
            "base_url": str(config.get("ui.base_url", cls.base_url)).rstrip("/"),
            "viewport": {
                "width": config.get("ui.viewport.width", 1280),
                "height": config.get("ui.viewport.height", 720),
            },
            "record_artifacts_on_failure": config.get("artifacts.record_on_failure", True),
            "browser_type": config.get("ui.browser", cls.browser_type),
            "headless": config.get("ui.headless", True),
            "navigation_timeout_ms": config.get("ui.timeouts.navigation", cls.navigation_timeout_ms),
            "element_timeout_ms": config.get("ui.timeouts.element", cls.element_timeout_ms),
            "download_timeout_ms": config.get("ui.timeouts.download", cls.download_timeout_ms),
            "artifacts_dir": Path(config.get("artifacts.dir", "test-results")),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def with_viewport(self, width: int, height: int) -> "SessionConfig":
        """Copy of this config with another viewport (responsive checks)."""
        return replace(self, viewport={"width": width, "height": height})


# ================================================================================
# Browser Session
# ================================================================================

class BrowserSession:
    """
    One isolated browser context and page, owned by exactly one test.

    Page objects wrap a session; they read the page handle, the base URL and
    the current locale from it. The session is created and destroyed by
    `BrowserManager.session()`.
    """

    def __init__(
        self,
        context: BrowserContext,
        page: Page,
        config: SessionConfig,
        output_dir: Path,
        name: str,
    ):
        self.context = context
        self.page = page
        self.config = config
        self.output_dir = output_dir
        self.name = name
        self.locale = LocaleContext()
        self.failed = False
        self.artifacts: List[Path] = []
        self._tracing = False
        self._smart_locators: List[Any] = []

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def url_for(self, path: str) -> str:
        """Absolute URL for an application path, keeping the current locale."""
        return f"{self.base_url}{self.locale.apply(path)}"

    def sync_locale(self) -> LocaleContext:
        """Re-derive the locale from the page URL after a navigation."""
        self.locale = LocaleContext.from_url(self.page.url)
        return self.locale

    def artifact_path(self, filename: str) -> Path:
        """Path inside this test's output directory."""
        ensure_directory(self.output_dir)
        return self.output_dir / filename

    def register_locator(self, smart_locator: Any) -> None:
        """Track a SmartLocator so its health report lands in failure artifacts."""
        self._smart_locators.append(smart_locator)

    def mark_failed(self) -> None:
        self.failed = True

    async def start_tracing(self) -> None:
        await self.context.tracing.start(screenshots=True, snapshots=True, sources=False)
        self._tracing = True

    async def capture_failure_artifacts(self) -> List[Path]:
        """
        Save screenshot, trace and current URL for a failed test.

        Each artifact is attempted independently so a broken page still
        yields whatever could be captured.
        """
        captured: List[Path] = []

        screenshot_path = self.artifact_path("failure.png")
        try:
            await self.page.screenshot(path=str(screenshot_path), full_page=True)
            attach_file(screenshot_path, name="failure_screenshot", content_type="image/png")
            captured.append(screenshot_path)
        except Exception as e:
            logger.warning(f"Failed to capture screenshot for {self.name}: {e}")

        if self._tracing:
            trace_path = self.artifact_path("trace.zip")
            try:
                await self.context.tracing.stop(path=str(trace_path))
                self._tracing = False
                attach_file(trace_path, name="playwright_trace", content_type="application/zip")
                captured.append(trace_path)
            except Exception as e:
                logger.warning(f"Failed to save trace for {self.name}: {e}")

        try:
            attach_text(self.page.url, name="Current URL")
        except Exception as e:
            logger.warning(f"Failed to attach URL for {self.name}: {e}")

        reports = [s.get_health_report() for s in self._smart_locators if s.used_fallbacks]
        if reports:
            attach_text("\n".join(reports), name="Locator Health Report")

        self.artifacts.extend(captured)
        logger.info(f"Failure artifacts for {self.name}: {[str(p) for p in captured]}")
        return captured

    async def close(self) -> None:
        """Flush traces and close the context. Safe to call more than once."""
        try:
            if self._tracing:
                self._tracing = False
                await self.context.tracing.stop()
        finally:
            await self.context.close()


# ================================================================================
# Browser Manager
# ================================================================================

class BrowserManager:
    """
    Manages the browser process and hands out isolated sessions.

    Usage:
        async with BrowserManager(config) as manager:
            async with manager.session("test_search") as session:
                await session.page.goto(session.url_for("/owners/find"))
    """

    # Default browser launch options
    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "args": [
            "--ignore-certificate-errors",
        ],
    }

    # Default context options
    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "ignore_https_errors": True,
        "accept_downloads": True,
    }

    def __init__(self, config: SessionConfig):
        """
        Initialize browser manager.

        Args:
            config: Session options (browser type, headless, viewport, ...)
        """
        self.config = config

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch browser."""
        self._playwright = await async_playwright().start()

        if self.config.browser_type == "firefox":
            browser_launcher = self._playwright.firefox
        elif self.config.browser_type == "webkit":
            browser_launcher = self._playwright.webkit
        else:
            browser_launcher = self._playwright.chromium

        launch_options = {
            **self.DEFAULT_LAUNCH_OPTIONS,
            "headless": self.config.headless,
        }
        if self.config.browser_type != "chromium":
            launch_options.pop("args")

        self._browser = await browser_launcher.launch(**launch_options)
        logger.debug(
            f"Browser started: {self.config.browser_type} "
            f"(headless={self.config.headless})"
        )

    async def close(self) -> None:
        """Close browser and stop Playwright."""
        try:
            if self._browser:
                await self._browser.close()
        finally:
            self._browser = None
            if self._playwright:
                await self._playwright.stop()
                self._playwright = None
        logger.debug("Browser closed")

    async def new_context(self, config: Optional[SessionConfig] = None) -> BrowserContext:
        """
        Create new isolated browser context.

        Each context has separate cookies, storage and cache.
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        config = config or self.config
        context = await self._browser.new_context(
            **self.DEFAULT_CONTEXT_OPTIONS,
            base_url=config.base_url,
            viewport=dict(config.viewport),
        )
        context.set_default_timeout(config.element_timeout_ms)
        context.set_default_navigation_timeout(config.navigation_timeout_ms)
        return context

    @asynccontextmanager
    async def session(
        self,
        name: str,
        config: Optional[SessionConfig] = None,
    ) -> AsyncIterator[BrowserSession]:
        """
        Scoped browser session.

        The context is closed on every exit path. When the body raises, or the
        caller marked the session failed, failure artifacts are captured first
        (if enabled).

        Args:
            name: Test identifier, used for the output directory
            config: Per-session options (defaults to the manager config)
        """
        config = config or self.config
        context = await self.new_context(config)
        output_dir = config.artifacts_dir / safe_filename(name)
        session: Optional[BrowserSession] = None
        try:
            page = await context.new_page()
            session = BrowserSession(context, page, config, output_dir, name)
            if config.record_artifacts_on_failure:
                await session.start_tracing()
            logger.debug(f"Session opened: {name}")
            yield session
        except BaseException:
            if session is not None:
                session.mark_failed()
            raise
        finally:
            try:
                if session is not None and session.failed and config.record_artifacts_on_failure:
                    await session.capture_failure_artifacts()
            finally:
                if session is not None:
                    await session.close()
                else:
                    await context.close()
                logger.debug(f"Session closed: {name}")

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


__all__ = [
    "SessionConfig",
    "BrowserSession",
    "BrowserManager",
]
