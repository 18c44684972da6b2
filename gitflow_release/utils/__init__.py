"""Utility functions."""

from .logging import setup_logging, get_logger, resolve_level
from .semver import (
    INCREMENT_KINDS,
    SemVer,
    parse_loose,
    increment,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "resolve_level",
    "INCREMENT_KINDS",
    "SemVer",
    "parse_loose",
    "increment",
]
