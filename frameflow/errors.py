"""
================================================================================
Engine Exceptions
================================================================================

Failure conditions raised by the element resolution and action layers.

Playwright's own errors (launch failures, detached elements) are never
wrapped; they reach the caller unchanged.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations


class FrameflowError(Exception):
    """Base class for engine errors."""
    pass


class ElementNotFoundError(FrameflowError):
    """Raised when no frame within the depth bound holds a matching element."""

    def __init__(self, locator: str):
        self.locator = locator
        super().__init__(f"Element not found in any frame: {locator}")


class UnsupportedOperationError(FrameflowError):
    """Raised for an operation spanning two different frames."""
    pass


class ElementGeometryError(FrameflowError):
    """Raised when an element has no bounding box to act on."""
    pass


class LocatorNotFoundError(FrameflowError):
    """Raised when an identifier file or entry does not exist."""
    pass


__all__ = [
    "FrameflowError",
    "ElementNotFoundError",
    "UnsupportedOperationError",
    "ElementGeometryError",
    "LocatorNotFoundError",
]
