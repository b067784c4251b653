"""
================================================================================
Browser Manager
================================================================================

Per-worker browser lifecycle management for UI automation.

Features:
    - One browser/context/page session per worker thread
    - Explicit worker-id -> session mapping (injectable for tests)
    - Video recording and trace capture presets
    - Idempotent teardown, safe after a partial initialize

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Hashable, Optional

from loguru import logger
from playwright.sync_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    sync_playwright,
)

from .config_loader import EngineConfig


# kind -> (Playwright browser type attribute, release channel)
BROWSER_KINDS: Dict[str, tuple] = {
    "chromium": ("chromium", None),
    "chrome": ("chromium", "chrome"),
    "msedge": ("chromium", "msedge"),
    "edge": ("chromium", "msedge"),
    "firefox": ("firefox", None),
    "webkit": ("webkit", None),
    "safari": ("webkit", None),
}


@dataclass
class Session:
    """Browser, isolated context and active page owned by one worker."""
    browser: Optional[Browser] = None
    context: Optional[BrowserContext] = None
    page: Optional[Page] = None


class PlaywrightEngine:
    """
    Lazily started Playwright driver handles.

    The synchronous driver may only be used from the thread that started
    it, so one driver is kept per worker. Once started, a driver is reused
    read-only until stop() is called for that worker.
    """

    def __init__(self, factory: Callable[[], Any] = sync_playwright):
        self._factory = factory
        self._drivers: Dict[Hashable, Playwright] = {}
        self._managers: Dict[Hashable, Any] = {}

    def get(self, worker: Hashable) -> Playwright:
        """Return the worker's driver, starting it on first use."""
        driver = self._drivers.get(worker)
        if driver is None:
            manager = self._factory()
            driver = manager.start()
            self._managers[worker] = manager
            self._drivers[worker] = driver
            logger.debug(f"Playwright driver started for worker {worker}")
        return driver

    def is_started(self, worker: Hashable) -> bool:
        return worker in self._drivers

    def stop(self, worker: Hashable) -> None:
        """Stop the worker's driver. No-op if it was never started."""
        driver = self._drivers.pop(worker, None)
        self._managers.pop(worker, None)
        if driver is not None:
            driver.stop()
            logger.debug(f"Playwright driver stopped for worker {worker}")


class SessionStore:
    """
    Owns one browser/context/page session per worker.

    Sessions are keyed by worker id, which defaults to the calling thread's
    ident. Every operation touches only the calling worker's session.

    Usage:
        store = SessionStore(load_engine_config())
        session = store.initialize("chromium")
        session.page.goto("https://example.com")
        store.teardown()
        store.shutdown()
    """

    def __init__(
        self,
        config: EngineConfig,
        playwright_factory: Callable[[], Any] = sync_playwright,
        worker_id: Callable[[], Hashable] = threading.get_ident,
    ):
        """
        Args:
            config: Engine settings, read-only
            playwright_factory: Returns an object whose start() yields a Playwright driver
            worker_id: Returns the identity of the calling worker
        """
        self.config = config
        self.engine = PlaywrightEngine(playwright_factory)
        self._worker_id = worker_id
        self._sessions: Dict[Hashable, Session] = {}

    @property
    def worker(self) -> Hashable:
        """Identity of the calling worker."""
        return self._worker_id()

    def initialize(self, kind: Optional[str] = None) -> Session:
        """
        Launch a browser, open one context and one page, bind them to this worker.

        Args:
            kind: Browser kind - 'chromium', 'chrome', 'msedge', 'firefox',
                'webkit'. Defaults to the configured kind.

        Returns:
            The new Session

        Raises:
            RuntimeError: If this worker already holds a session
        """
        worker = self.worker
        if worker in self._sessions:
            raise RuntimeError(
                f"Worker {worker} already has an active session. "
                f"Call teardown() first."
            )

        kind = (kind or self.config.browser_kind).lower()
        logger.info(f"Initializing {kind} browser for worker: {worker}")

        session = Session()
        self._sessions[worker] = session

        session.browser = self._launch(kind)
        session.context = self._new_context(session.browser)
        session.page = self._new_page(session.context)

        logger.info(f"Browser initialization complete for worker: {worker}")
        return session

    def current(self) -> Optional[Session]:
        """Session bound to the calling worker, or None."""
        return self._sessions.get(self.worker)

    def new_page(self) -> Page:
        """
        Open another page in this worker's context and make it the active page.

        Earlier pages stay open until the context is closed.
        """
        session = self.current()
        if session is None or session.context is None:
            raise RuntimeError("No session for this worker. Call initialize() first.")

        session.page = self._new_page(session.context)
        logger.debug(f"Active page switched for worker: {self.worker}")
        return session.page

    def teardown(self) -> None:
        """
        Close page, context and browser of this worker, in that order.

        Missing or already closed parts are skipped; close failures are
        logged. Calling this twice, or without a session, does nothing.
        """
        worker = self.worker
        session = self._sessions.pop(worker, None)
        if session is None:
            logger.debug(f"No session to tear down for worker: {worker}")
            return

        logger.info(f"Closing browser for worker: {worker}")

        if session.page is not None and not session.page.is_closed():
            self._safe_close("page", session.page.close)

        if session.context is not None:
            if self.config.tracing:
                self._safe_close("trace", lambda: self._stop_tracing(session.context))
            self._safe_close("context", session.context.close)

        if session.browser is not None and session.browser.is_connected():
            self._safe_close("browser", session.browser.close)

        logger.info(f"Browser closed for worker: {worker}")

    def shutdown(self) -> None:
        """Tear down this worker's session and stop its Playwright driver."""
        self.teardown()
        self.engine.stop(self.worker)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _launch(self, kind: str) -> Browser:
        if kind not in BROWSER_KINDS:
            logger.warning(f"Unknown browser kind '{kind}', falling back to chromium")
        engine_name, channel = BROWSER_KINDS.get(kind, BROWSER_KINDS["chromium"])

        launch_options: Dict[str, Any] = {
            "headless": self.config.headless,
            "slow_mo": self.config.slow_mo,
            "timeout": self.config.page_timeout,
        }
        if channel:
            launch_options["channel"] = channel
        if engine_name == "chromium" and self.config.browser_args:
            launch_options["args"] = list(self.config.browser_args)

        driver = self.engine.get(self.worker)
        browser = getattr(driver, engine_name).launch(**launch_options)
        logger.debug(
            f"Browser started: {kind} (headless={self.config.headless})"
        )
        return browser

    def _new_context(self, browser: Browser) -> BrowserContext:
        context_options: Dict[str, Any] = {"viewport": self.config.viewport}
        if self.config.record_video:
            context_options["record_video_dir"] = str(self.config.video_dir)

        context = browser.new_context(**context_options)

        if self.config.tracing:
            context.tracing.start(screenshots=True, snapshots=True)
            logger.debug("Tracing started")

        return context

    def _new_page(self, context: BrowserContext) -> Page:
        page = context.new_page()
        page.set_default_timeout(self.config.element_timeout)
        page.set_default_navigation_timeout(self.config.page_timeout)
        return page

    def _stop_tracing(self, context: BrowserContext) -> None:
        self.config.trace_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        trace_path = self.config.trace_dir / f"trace_{self.worker}_{timestamp}.zip"
        context.tracing.stop(path=str(trace_path))
        logger.info(f"Trace saved to: {trace_path}")

    def _safe_close(self, what: str, close: Callable[[], None]) -> None:
        try:
            close()
        except Exception as e:
            logger.warning(f"Failed to close {what} for worker {self.worker}: {e}")


__all__ = [
    "BROWSER_KINDS",
    "PlaywrightEngine",
    "Session",
    "SessionStore",
]
