"""
Repository-level pytest configuration.

Why this exists:
  - Configure Loguru once for every test run
  - Attach a failure screenshot to the Allure report for UI tests
  - Write the Allure environment widget when --alluredir is given
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest
from loguru import logger

from frameflow.config_loader import ConfigLoader
from frameflow_tools.common import init_logger
from frameflow_tools.report_tools import write_environment_properties


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _logging() -> Generator[None, None, None]:
    """Route all engine logging through the shared Loguru configuration."""
    loader = ConfigLoader()
    init_logger(
        level=loader.get("logging.level", "INFO"),
        log_file=loader.get("logging.file"),
    )
    yield


def pytest_sessionstart(session):
    results_dir = session.config.getoption("allure_report_dir", default=None)
    if results_dir:
        write_environment_properties(results_dir, {
            "Browser": os.getenv("BROWSER_KIND", "chromium"),
            "Headless": os.getenv("BROWSER_HEADLESS", "true"),
        })


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Hook to capture screenshots on test failure.

    Takes a screenshot of the active page when a UI test using the `web`
    fixture fails; ScreenshotCapture attaches it to the Allure report.
    """
    outcome = yield
    report = outcome.get_result()

    if report.when == "call" and report.failed:
        web = getattr(item, "funcargs", {}).get("web")
        if web is not None:
            try:
                web.capture_screenshot("test_failure")
            except Exception as e:
                logger.warning(f"Failed to capture screenshot on failure: {e}")
