"""Exceptions raised by the link model and persistence layer.

Classes:
    LinkError:
        Generic base class for link-related exceptions.

    InvalidUrl:
        Raised when a candidate destination is not a well-formed absolute URL.

    DatabaseError:
        Raised for any datastore failure (connectivity, constraint, timeout).
        The underlying cause is logged and chained, never shown to callers.

    HashCollision:
        Raised when an insert hits the unique constraint on ``hash``.
"""

from typing import Optional


class LinkError(Exception):
    """Generic base class for link-related exceptions."""

    message = "link error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class InvalidUrl(LinkError):
    """The candidate destination failed URL syntax validation."""

    message = "malformed url"


class DatabaseError(LinkError):
    """A datastore operation failed."""

    message = "could not complete database operation"


class HashCollision(DatabaseError):
    """A generated hash already exists in the datastore."""

    message = "hash already exists"
