"""
Fixtures for engine unit tests.

Everything runs against the fakes in testsuites.unit.fakes; no browser is
launched.
"""

from pathlib import Path

import pytest

from frameflow.browser_manager import Session
from frameflow.config_loader import EngineConfig
from frameflow.element_actions import WebActions
from frameflow.element_resolver import ElementResolver
from frameflow.screenshot import ScreenshotCapture


class StubStore:
    """Session store holding one fixed session for a single worker."""

    def __init__(self, config, page, context=None, worker="worker-1"):
        self.config = config
        self.worker = worker
        self.session = Session(browser=None, context=context, page=page)

    def current(self):
        return self.session


@pytest.fixture
def engine_config(tmp_path: Path) -> EngineConfig:
    return EngineConfig(
        element_timeout=900,
        page_timeout=3000,
        screenshots_dir=tmp_path / "screenshots",
        identifiers_dir=tmp_path / "identifiers",
        trace_dir=tmp_path / "traces",
        video_dir=tmp_path / "videos",
    )


@pytest.fixture
def screenshots(engine_config: EngineConfig) -> ScreenshotCapture:
    return ScreenshotCapture(
        engine_config.screenshots_dir,
        worker_id=lambda: "worker-1",
        attach_to_report=False,
    )


@pytest.fixture
def resolver(engine_config: EngineConfig, screenshots: ScreenshotCapture) -> ElementResolver:
    return ElementResolver(engine_config, screenshots)


@pytest.fixture
def make_actions(engine_config: EngineConfig, screenshots: ScreenshotCapture):
    """Build WebActions bound to a fake page."""

    def _make(page, context=None) -> WebActions:
        store = StubStore(engine_config, page, context=context)
        return WebActions(store, screenshots=screenshots)

    return _make
