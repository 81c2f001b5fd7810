"""Common utilities for the link shortener."""

from .validators import normalize_url
from .logging_config import setup_logging

__all__ = [
    "normalize_url",
    "setup_logging",
]
