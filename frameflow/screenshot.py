"""
================================================================================
Screenshot Capture
================================================================================

Best-effort diagnostic screenshots for the resolver and the action layer.

Every file name carries the worker id of the thread that took it, so
parallel sessions never overwrite or pick up each other's screenshots.
A failed capture is logged and reported as None; it never raises.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Hashable, Optional

from loguru import logger
from playwright.sync_api import Page

from frameflow_tools.report_tools import attach_screenshot


class ScreenshotCapture:
    """
    Writes full-page PNG screenshots to a configurable directory.

    Usage:
        capture = ScreenshotCapture(Path("screenshots"))
        path = capture.capture(page, "element_not_found")
        # screenshots/element_not_found_<worker>_20240101_120000_123456.png
    """

    def __init__(
        self,
        directory: Path,
        worker_id: Callable[[], Hashable] = threading.get_ident,
        attach_to_report: bool = True,
    ):
        """
        Args:
            directory: Output directory, created on first capture
            worker_id: Returns the identity of the calling worker
            attach_to_report: Also attach each screenshot to the running Allure test
        """
        self.directory = Path(directory)
        self._worker_id = worker_id
        self.attach_to_report = attach_to_report

    def build_path(self, name: str) -> Path:
        """Derive <dir>/<name>_<worker>_<timestamp>.png for the calling worker."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        return self.directory / f"{name}_{self._worker_id()}_{timestamp}.png"

    def capture(self, page: Optional[Page], name: str) -> Optional[Path]:
        """
        Capture a full-page screenshot.

        Args:
            page: Page to capture; None is tolerated and yields no file
            name: Tag describing why the screenshot was taken

        Returns:
            Path to the saved screenshot, or None if capture failed
        """
        if page is None:
            logger.warning(f"No active page, skipping screenshot: {name}")
            return None

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path = self.build_path(name)

            logger.info(f"Capturing screenshot: {path}")
            page.screenshot(path=str(path), full_page=True)
        except Exception as e:
            logger.error(f"Failed to capture screenshot '{name}': {e}")
            return None

        if self.attach_to_report:
            try:
                attach_screenshot(path, name=name)
            except Exception as e:
                logger.debug(f"Screenshot not attached to report: {e}")

        return path

    def latest(self, worker: Optional[Hashable] = None) -> Optional[Path]:
        """
        Most recent screenshot taken by a worker.

        Args:
            worker: Worker id to look up; defaults to the calling worker

        Returns:
            Path of the newest matching file, or None if there is none
        """
        if worker is None:
            worker = self._worker_id()
        if not self.directory.is_dir():
            return None

        candidates = [
            path for path in self.directory.glob("*.png")
            if f"_{worker}_" in path.name
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda path: path.stat().st_mtime)


__all__ = [
    "ScreenshotCapture",
]
