"""Core business logic for the link shortener."""

from .exceptions import LinkError, InvalidUrl, DatabaseError, HashCollision
from .links import Link
from .shortcode import ShortCodeGenerator
from .service import LinkService

__all__ = [
    "LinkError",
    "InvalidUrl",
    "DatabaseError",
    "HashCollision",
    "Link",
    "ShortCodeGenerator",
    "LinkService",
]
