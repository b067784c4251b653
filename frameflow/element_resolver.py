"""
================================================================================
Element Resolver
================================================================================

Frame-aware element location.

Search order:
    1. Root frame, waiting for a visible match (fast path)
    2. Descendant frames depth first, waiting for an attached match,
       down to the configured depth bound

Every frame lookup gets a reduced budget (element timeout divided by the
fast-path divisor), so a miss costs at most frames visited x budget rather
than frames visited x element timeout.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger
from playwright.sync_api import ElementHandle, Error as PlaywrightError, Frame, Page

from .config_loader import EngineConfig
from .errors import ElementNotFoundError
from .frame_tree import FrameTreeView
from .screenshot import ScreenshotCapture


@dataclass(frozen=True)
class SearchResult:
    """
    A located element and the frame that contains it.

    The element handle is only valid while its frame stays attached.
    """
    element: ElementHandle
    frame: Frame


class ElementResolver:
    """
    Finds the first element matching a locator anywhere in a page's frame tree.

    Usage:
        resolver = ElementResolver(config, ScreenshotCapture(config.screenshots_dir))
        result = resolver.resolve(page, "css=#submit")
        result.element.click()
    """

    def __init__(
        self,
        config: EngineConfig,
        screenshots: Optional[ScreenshotCapture] = None,
    ):
        self.config = config
        self.screenshots = screenshots or ScreenshotCapture(config.screenshots_dir)

    def frame_budget(self, timeout: Optional[float] = None) -> float:
        """
        Per-frame lookup timeout in milliseconds.

        None or a non-positive timeout falls back to the configured element
        timeout; Playwright reads 0 as "wait forever".
        """
        if timeout is None or timeout <= 0:
            return self.config.frame_timeout
        return timeout / self.config.fast_path_divisor

    def resolve(
        self,
        page: Page,
        locator: str,
        timeout: Optional[float] = None,
    ) -> SearchResult:
        """
        Locate an element in the root frame or any frame below it.

        Args:
            page: Page whose frame tree is searched
            locator: Selector passed through to Playwright
            timeout: Full element timeout in ms; defaults to the configured one

        Returns:
            SearchResult with the element and its owning frame

        Raises:
            ValueError: If locator is empty
            ElementNotFoundError: If no visited frame holds a match
        """
        if not locator:
            raise ValueError("Locator must be a non-empty string")

        budget = self.frame_budget(timeout)
        tree = FrameTreeView(page)
        logger.debug(f"Searching for element across frames: {locator}")

        root = tree.root
        element = self._lookup(root, locator, budget, state="visible")
        if element is not None:
            logger.debug(f"Element found in main frame: {locator}")
            return SearchResult(element, root)

        logger.debug(f"Element not found in main frame, searching in frames: {locator}")
        for frame, depth in tree.walk(self.config.max_frame_depth):
            element = self._lookup(frame, locator, budget, state="attached")
            if element is not None:
                logger.debug(f"Element found in frame at depth {depth}: {locator}")
                return SearchResult(element, frame)

        logger.error(f"Element not found in any frame: {locator}")
        self.screenshots.capture(page, "element_not_found")
        raise ElementNotFoundError(locator)

    @staticmethod
    def _lookup(
        frame: Frame,
        locator: str,
        budget: float,
        state: str,
    ) -> Optional[ElementHandle]:
        # A timeout or a frame detached mid-wait means "not in this frame".
        try:
            return frame.wait_for_selector(locator, timeout=budget, state=state)
        except PlaywrightError as e:
            logger.trace(f"No match in frame {frame.name or frame.url}: {e}")
            return None


__all__ = [
    "ElementResolver",
    "SearchResult",
]
