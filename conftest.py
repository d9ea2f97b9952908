"""
Repository-level pytest configuration.

Why this exists:
  - Provide safe defaults for local runs against a clinic instance on localhost
  - Expose the browser options on the command line
  - Configure loguru once per process (once per xdist worker)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from clinic_tools.common import init_logger
from testsuites.ui_testing.framework.config_loader import ConfigLoader


def pytest_addoption(parser):
    """Command line options for browser tests (they win over config/env)."""
    group = parser.getgroup("clinic", "Clinic E2E options")
    group.addoption(
        "--ui-base-url",
        action="store",
        default=None,
        help="Base URL of the clinic application (default: ui.base_url / UI_BASE_URL)",
    )
    group.addoption(
        "--ui-browser",
        action="store",
        default=None,
        choices=["chromium", "firefox", "webkit"],
        help="Browser engine (default: ui.browser / UI_BROWSER)",
    )
    group.addoption(
        "--ui-headed",
        action="store_true",
        default=False,
        help="Show the browser window",
    )


def pytest_configure(config):
    settings = ConfigLoader()
    init_logger(
        level=settings.get("logging.level", "INFO"),
        log_file=settings.get("logging.file", "") or None,
    )


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _local_env_defaults() -> Generator[None, None, None]:
    """
    Set environment defaults if not already provided by the user/CI.

    Keeps local runs predictable: the application is expected on port 8080.
    """
    defaults = {
        "UI_BASE_URL": "http://localhost:8080",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    yield
