"""Database layer for the link shortener."""

from .postgres import LinkDatabase, DATASTORE_ERRORS
from .queries import LinkQueries

__all__ = ["LinkDatabase", "LinkQueries", "DATASTORE_ERRORS"]
