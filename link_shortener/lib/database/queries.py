"""Persistence operations for links.

Every operation runs against one connection checked out by the caller, so a
single request never holds more than one pooled connection.
"""

import logging
from typing import List, Optional

import asyncpg

from ..exceptions import DatabaseError, HashCollision
from ..links import Link
from .postgres import DATASTORE_ERRORS


# Name PostgreSQL gives the inline UNIQUE constraint on links.hash
HASH_CONSTRAINT = "links_hash_key"


class LinkQueries:
    """SQL for inserting, finding and listing links."""
    
    INSERT_SQL = """
    INSERT INTO links (id, hash, destination)
    VALUES ($1, $2, $3)
    RETURNING id, hash, destination
    """
    
    GET_BY_HASH_SQL = "SELECT id, hash, destination FROM links WHERE hash = $1"
    
    LIST_SQL = "SELECT id, hash, destination FROM links ORDER BY destination"
    
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
    
    async def insert(self, conn: asyncpg.Connection, link: Link) -> Link:
        """Insert a well-formed link and return the row as stored.
        
        Args:
            conn: Checked-out connection
            link: Link to insert
            
        Returns:
            The stored link
            
        Raises:
            HashCollision: If another link already uses ``link.hash``
            DatabaseError: On any other datastore failure
        """
        try:
            row = await conn.fetchrow(self.INSERT_SQL, link.id, link.hash, link.destination)
        except asyncpg.UniqueViolationError as e:
            if getattr(e, "constraint_name", None) == HASH_CONSTRAINT:
                self.logger.warning(f"Hash collision on insert: {link.hash}")
                raise HashCollision() from e
            self.logger.error(f"Error inserting link {link.id}: {e!r}")
            raise DatabaseError() from e
        except DATASTORE_ERRORS as e:
            self.logger.error(f"Error inserting link {link.id}: {e!r}")
            raise DatabaseError() from e
        
        if row is None:
            self.logger.error(f"Insert returned no row for link {link.id}")
            raise DatabaseError()
        
        self.logger.info(f"Created link: {link.hash} -> {link.destination}")
        return Link.from_record(row)
    
    async def get_by_hash(self, conn: asyncpg.Connection, hash: str) -> Optional[Link]:
        """Fetch the link with a given hash, if one exists.
        
        Args:
            conn: Checked-out connection
            hash: Exact hash to look up
            
        Returns:
            The link, or None if no row matches
            
        Raises:
            DatabaseError: On datastore failure
        """
        try:
            row = await conn.fetchrow(self.GET_BY_HASH_SQL, hash)
        except DATASTORE_ERRORS as e:
            self.logger.error(f"Error getting link by hash {hash!r}: {e!r}")
            raise DatabaseError() from e
        
        if row is None:
            return None
        return Link.from_record(row)
    
    async def list(self, conn: asyncpg.Connection) -> List[Link]:
        """List every link ordered by destination.
        
        A failed read is logged and yields an empty list.
        """
        try:
            rows = await conn.fetch(self.LIST_SQL)
        except DATASTORE_ERRORS as e:
            self.logger.error(f"Error listing links: {e!r}")
            return []
        
        return [Link.from_record(row) for row in rows]
    
    async def ping(self, conn: asyncpg.Connection) -> None:
        """Run a trivial query.
        
        Raises:
            DatabaseError: On datastore failure
        """
        try:
            await conn.fetchval("SELECT 1")
        except DATASTORE_ERRORS as e:
            self.logger.error(f"Health check failed: {e!r}")
            raise DatabaseError() from e
