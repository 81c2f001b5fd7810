"""A small URL-shortening REST service."""

__version__ = "0.1.0"
