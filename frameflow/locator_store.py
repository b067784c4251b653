"""
================================================================================
Locator Store
================================================================================

Element identifiers kept in one JSON file per component:

    config/identifiers/LoginForm.json
    {
        "username": "#username",
        "submit": {"type": "xpath", "value": "//button[@type='submit']"}
    }

Plain strings are returned as they are; {"type", "value"} objects become
"type=value", which Playwright reads as a selector engine prefix.

Files are parsed once and cached. Entries are never invalidated one by one;
clear_cache() drops everything.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from loguru import logger

from .errors import LocatorNotFoundError


class LocatorStore:
    """
    Read-mostly cache of component identifier files.

    Usage:
        store = LocatorStore(config.identifiers_dir)
        actions.click(store.get_locator("LoginForm", "submit"))
    """

    def __init__(self, identifiers_dir: Path):
        self.identifiers_dir = Path(identifiers_dir)
        self._cache: Dict[str, Dict[str, Any]] = {}

    def get_identifiers(self, component: str) -> Dict[str, Any]:
        """Raw identifier mapping for a component, loaded on first use."""
        identifiers = self._cache.get(component)
        if identifiers is not None:
            return identifiers

        path = self.identifiers_dir / f"{component}.json"
        if not path.exists():
            logger.error(f"Identifiers file not found: {path}")
            raise LocatorNotFoundError(f"Identifiers file not found: {path}")

        logger.info(f"Loading identifiers from file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            identifiers = json.load(f)

        # Concurrent first loads of the same component keep whichever landed first.
        return self._cache.setdefault(component, identifiers)

    def get_locator(self, component: str, name: str) -> str:
        """
        Locator string for one named element.

        Raises:
            LocatorNotFoundError: If the file or the entry does not exist
        """
        identifiers = self.get_identifiers(component)
        if name not in identifiers:
            logger.error(f"Locator not found: {name} in {component}")
            raise LocatorNotFoundError(f"Locator not found: {name} in {component}")
        return self._to_locator(identifiers[name])

    def get_all_locators(self, component: str) -> Dict[str, str]:
        return {
            name: self._to_locator(entry)
            for name, entry in self.get_identifiers(component).items()
        }

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.debug("Identifier cache cleared")

    @staticmethod
    def _to_locator(entry: Any) -> str:
        if isinstance(entry, dict):
            return f"{entry['type']}={entry['value']}"
        return str(entry)


__all__ = [
    "LocatorStore",
]
