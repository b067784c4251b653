"""
================================================================================
frameflow_tools Common Utilities
================================================================================

Exports:
    - init_logger: Configure the loguru logger with the standard sinks
    - get_logger: Return the configured logger, initializing on first use

Usage:
    from frameflow_tools.common import init_logger

    init_logger(level="DEBUG")

================================================================================
"""

from .global_config import get_logger, init_logger, reset_logger

__all__ = [
    "init_logger",
    "get_logger",
    "reset_logger",
]
