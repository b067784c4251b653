"""
================================================================================
Bulk Query
================================================================================

Collects every element matching a locator across the root frame and all
descendant frames within the depth bound.

A frame whose query fails contributes zero matches; the rest of the
aggregate is still returned.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import List

from loguru import logger
from playwright.sync_api import Error as PlaywrightError, Frame, Page

from .config_loader import EngineConfig
from .element_resolver import SearchResult
from .frame_tree import FrameTreeView


class BulkQuery:
    """
    Multi-match counterpart of ElementResolver.

    Results are ordered by frame visit order (root first, then depth-first
    descendants), and within a frame by document order.
    """

    def __init__(self, config: EngineConfig):
        self.config = config

    def find_all(self, page: Page, locator: str) -> List[SearchResult]:
        """Every match for locator in every frame up to the depth bound."""
        if not locator:
            raise ValueError("Locator must be a non-empty string")

        tree = FrameTreeView(page)
        results = self._query(tree.root, locator)
        for frame, _depth in tree.walk(self.config.max_frame_depth):
            results.extend(self._query(frame, locator))

        logger.debug(f"Found {len(results)} element(s) matching: {locator}")
        return results

    def count(self, page: Page, locator: str) -> int:
        return len(self.find_all(page, locator))

    @staticmethod
    def _query(frame: Frame, locator: str) -> List[SearchResult]:
        try:
            handles = frame.query_selector_all(locator)
        except PlaywrightError as e:
            logger.debug(f"Query failed in frame {frame.name or frame.url}, skipping: {e}")
            return []
        return [SearchResult(handle, frame) for handle in handles]


__all__ = [
    "BulkQuery",
]
