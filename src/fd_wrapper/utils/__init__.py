"""Utility functions and classes."""

from .logging_utils import configure_logging, get_structured_logger, parse_level

__all__ = [
    "configure_logging",
    "get_structured_logger",
    "parse_level",
]
