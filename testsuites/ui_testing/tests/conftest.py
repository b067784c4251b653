"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for engine tests against a real browser.

Key Features:
- One SessionStore per test, torn down and stopped afterwards
- Nested-frame fixture pages served from memory via request routing
- Tests are skipped when no browser binary is installed

================================================================================
"""

from dataclasses import replace
from pathlib import Path
from typing import Generator
from urllib.parse import urlparse

import pytest
from loguru import logger
from playwright.sync_api import Route

from frameflow.browser_manager import SessionStore
from frameflow.config_loader import EngineConfig, load_engine_config
from frameflow.element_actions import WebActions


BASE_URL = "http://frameflow.test"


# ================================================================================
# Fixture Pages
# ================================================================================

def _html(body: str) -> str:
    return f"<!doctype html><html><body>{body}</body></html>"


def nested_page(depth: int, level: int) -> str:
    """Page at one level of a single chain of iframes; the target sits at the bottom."""
    if level == depth:
        return _html('<button id="target">Deep</button>')
    return _html(f'<p>level {level}</p><iframe src="/nest/{depth}/{level + 1}"></iframe>')


DRAG_FRAME = _html("""
<div id="src" style="width:60px;height:60px;background:#c33">drag</div>
<div class="row">a</div><div class="row">b</div>
<div id="dst" style="width:120px;height:80px;margin-top:40px;background:#3c3">drop</div>
<script>
  let dragging = false;
  document.getElementById('src').addEventListener('mousedown', () => { dragging = true; });
  document.getElementById('dst').addEventListener('mouseup', () => {
    if (dragging) { document.body.dataset.dropped = 'yes'; }
  });
</script>
""")

PAGES = {
    "/drag": _html(
        '<div id="outside">outside</div><div class="row">root</div>'
        '<iframe id="board" src="/drag-frame" width="400" height="300"></iframe>'
    ),
    "/drag-frame": DRAG_FRAME,
    "/dup": _html('<span id="dup">root</span><iframe src="/dup-frame"></iframe>'),
    "/dup-frame": _html('<span id="dup">frame</span>'),
    "/prompt": _html(
        '<button id="ask" onclick="document.getElementById(\'answer\').textContent'
        ' = prompt(\'Name?\')">Ask</button><span id="answer"></span>'
    ),
}


def _serve(route: Route) -> None:
    path = urlparse(route.request.url).path
    if path.startswith("/nest/"):
        depth, level = (int(part) for part in path.split("/")[2:4])
        body = nested_page(depth, level)
    elif path in PAGES:
        body = PAGES[path]
    else:
        route.fulfill(status=404, body="not found")
        return
    route.fulfill(status=200, content_type="text/html", body=body)


# ================================================================================
# Engine Fixtures
# ================================================================================

@pytest.fixture
def ui_config(tmp_path: Path) -> EngineConfig:
    """Headless settings with a short element timeout so misses fail fast."""
    return replace(
        load_engine_config(),
        headless=True,
        element_timeout=1500,
        screenshots_dir=tmp_path / "screenshots",
        trace_dir=tmp_path / "traces",
        video_dir=tmp_path / "videos",
    )


@pytest.fixture
def session_store(ui_config: EngineConfig) -> Generator[SessionStore, None, None]:
    """Initialized store for the test thread; skips if no browser can start."""
    store = SessionStore(ui_config)
    try:
        session = store.initialize()
    except Exception as e:
        store.shutdown()
        pytest.skip(f"Browser unavailable: {e}")

    session.context.route(f"{BASE_URL}/**", _serve)
    yield store

    logger.info("Tearing down UI session")
    store.shutdown()


@pytest.fixture
def web(session_store: SessionStore) -> WebActions:
    return WebActions(session_store)
