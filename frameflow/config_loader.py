"""
================================================================================
Configuration Loader
================================================================================

YAML-based engine configuration with environment variable overrides.

Features:
    - YAML file loading (config/config.yaml, or $FRAMEFLOW_CONFIG)
    - Environment variable override (ELEMENT_TIMEOUT overrides element.timeout)
    - Dot notation path access
    - Immutable EngineConfig resolved once and passed explicitly

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from loguru import logger


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (ELEMENT_TIMEOUT)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> loader = ConfigLoader()
        >>> loader.get("element.timeout", 10000)
        10000
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file. Falls back to
                $FRAMEFLOW_CONFIG, then DEFAULT_CONFIG_PATH.
        """
        if config_path is None:
            env_path = os.environ.get("FRAMEFLOW_CONFIG")
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
        self._config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "element.timeout")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value
        if isinstance(reference, (list, tuple)):
            return [part.strip() for part in value.split(",") if part.strip()]

        return value


@dataclass(frozen=True)
class EngineConfig:
    """
    Read-only engine settings, resolved once per process.

    Timeouts are in milliseconds.
    """
    browser_kind: str = "chromium"
    headless: bool = True
    slow_mo: float = 0
    page_timeout: float = 30000
    element_timeout: float = 10000
    viewport_width: int = 1280
    viewport_height: int = 720
    browser_args: Tuple[str, ...] = field(default_factory=tuple)
    record_video: bool = False
    video_dir: Path = Path("videos")
    tracing: bool = False
    trace_dir: Path = Path("traces")
    screenshots_dir: Path = Path("screenshots")
    identifiers_dir: Path = Path("config/identifiers")
    max_frame_depth: int = 5
    fast_path_divisor: float = 3.0

    @property
    def frame_timeout(self) -> float:
        """Per-frame lookup budget derived from the element timeout."""
        return self.element_timeout / self.fast_path_divisor

    @property
    def viewport(self) -> Dict[str, int]:
        return {"width": self.viewport_width, "height": self.viewport_height}

    @classmethod
    def from_loader(cls, loader: ConfigLoader) -> "EngineConfig":
        """Build settings from a ConfigLoader, falling back to field defaults."""
        defaults = cls()
        args = loader.get("browser.args", [])
        if isinstance(args, str):
            args = [part.strip() for part in args.split(",") if part.strip()]

        raw_divisor = loader.get("frames.fast_path_divisor", defaults.fast_path_divisor)
        try:
            divisor = float(raw_divisor)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"frames.fast_path_divisor must be a number, got {raw_divisor!r}"
            ) from e
        if divisor <= 0:
            raise ConfigurationError(
                f"frames.fast_path_divisor must be positive, got {divisor}"
            )

        return cls(
            browser_kind=loader.get("browser.kind", defaults.browser_kind),
            headless=loader.get("browser.headless", defaults.headless),
            slow_mo=loader.get("browser.slowmo", defaults.slow_mo),
            page_timeout=loader.get("browser.timeout", defaults.page_timeout),
            element_timeout=loader.get("element.timeout", defaults.element_timeout),
            viewport_width=loader.get("viewport.width", defaults.viewport_width),
            viewport_height=loader.get("viewport.height", defaults.viewport_height),
            browser_args=tuple(args or ()),
            record_video=loader.get("video.recording", defaults.record_video),
            video_dir=Path(loader.get("video.dir", str(defaults.video_dir))),
            tracing=loader.get("tracing.enabled", defaults.tracing),
            trace_dir=Path(loader.get("tracing.dir", str(defaults.trace_dir))),
            screenshots_dir=Path(
                loader.get("screenshots.dir", str(defaults.screenshots_dir))
            ),
            identifiers_dir=Path(
                loader.get("identifiers.dir", str(defaults.identifiers_dir))
            ),
            max_frame_depth=loader.get("frames.max_depth", defaults.max_frame_depth),
            fast_path_divisor=divisor,
        )


def load_engine_config(config_path: Optional[Path] = None) -> EngineConfig:
    """Load EngineConfig from YAML and environment in one step."""
    config = EngineConfig.from_loader(ConfigLoader(config_path))
    logger.debug(f"Engine configuration resolved: {config}")
    return config


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "EngineConfig",
    "load_engine_config",
]
