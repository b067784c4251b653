"""
================================================================================
frameflow
================================================================================

Frame-aware element resolution and action execution on top of Playwright.

Components:
    - config_loader: YAML/env configuration resolved into EngineConfig
    - browser_manager: Per-worker browser/context/page sessions
    - frame_tree: Read-only traversal of a page's frame tree
    - element_resolver: Depth-bounded search for one element across frames
    - bulk_query: All matches across all frames
    - element_actions: Locate-then-act wrapper with failure screenshots
    - locator_store: JSON identifier files with a shared cache
    - screenshot: Best-effort diagnostic screenshots

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import Session, SessionStore
from .bulk_query import BulkQuery
from .config_loader import ConfigLoader, ConfigurationError, EngineConfig, load_engine_config
from .element_actions import OPERATIONS, WebActions
from .element_resolver import ElementResolver, SearchResult
from .errors import (
    ElementGeometryError,
    ElementNotFoundError,
    FrameflowError,
    LocatorNotFoundError,
    UnsupportedOperationError,
)
from .frame_tree import FrameTreeView
from .locator_store import LocatorStore
from .screenshot import ScreenshotCapture

__all__ = [
    "BulkQuery",
    "ConfigLoader",
    "ConfigurationError",
    "ElementGeometryError",
    "ElementNotFoundError",
    "ElementResolver",
    "EngineConfig",
    "FrameTreeView",
    "FrameflowError",
    "LocatorNotFoundError",
    "LocatorStore",
    "OPERATIONS",
    "ScreenshotCapture",
    "SearchResult",
    "Session",
    "SessionStore",
    "UnsupportedOperationError",
    "WebActions",
    "load_engine_config",
]
