"""
================================================================================
Frame Tree View
================================================================================

Read-only traversal of a page's nested frame structure.

Child frames are returned in the order the browser reports them and read at
visit time, so frames attached or removed by page scripts between two calls
are picked up by the next traversal.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Iterator, List, Tuple

from playwright.sync_api import Frame, Page


class FrameTreeView:
    """
    Depth-aware view over page.main_frame and its descendants.

    Usage:
        tree = FrameTreeView(page)
        for frame, depth in tree.walk(max_depth=5):
            print(depth, frame.url)
    """

    def __init__(self, page: Page):
        self.page = page

    @property
    def root(self) -> Frame:
        """The page's main frame."""
        return self.page.main_frame

    @staticmethod
    def children(frame: Frame) -> List[Frame]:
        """Direct child frames, in browser order."""
        return list(frame.child_frames)

    def walk(self, max_depth: int) -> Iterator[Tuple[Frame, int]]:
        """
        Yield (frame, depth) for every descendant of the root, depth first.

        Depth counts parent-child hops from the root, so direct children of
        the root are at depth 1. Frames deeper than max_depth are skipped
        along with their subtrees. Iteration stops as soon as the caller
        stops consuming.
        """
        stack: List[Tuple[Frame, int]] = [
            (child, 1) for child in reversed(self.children(self.root))
        ]
        while stack:
            frame, depth = stack.pop()
            if depth > max_depth:
                continue
            yield frame, depth
            if depth < max_depth:
                stack.extend(
                    (child, depth + 1) for child in reversed(self.children(frame))
                )


__all__ = [
    "FrameTreeView",
]
