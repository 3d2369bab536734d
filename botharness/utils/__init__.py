"""
Utilities package for the bot fixture harness.

Exports shared helpers for cross-cutting concerns. Keep this package
lightweight and free of entity or persistence logic.
"""

from botharness.utils.logging import JsonFormatter, configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "JsonFormatter",
]
