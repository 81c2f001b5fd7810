"""Business logic service for the link shortener."""

import logging
from typing import List, Optional

from .database.postgres import LinkDatabase
from .database.queries import LinkQueries
from .exceptions import DatabaseError, HashCollision
from .links import Link
from .shortcode import ShortCodeGenerator


class LinkService:
    """Service layer composing link construction with persistence."""
    
    def __init__(
        self,
        db: LinkDatabase,
        queries: Optional[LinkQueries] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 3,
    ):
        """Initialize link service.
        
        Args:
            db: Database (connection pool) instance
            queries: Optional persistence operations
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_collision_retries: Extra attempts after a hash collision
        """
        self.db = db
        self.logger = logger or logging.getLogger(__name__)
        self.queries = queries or LinkQueries(logger=self.logger)
        self.generator = short_code_generator or ShortCodeGenerator()
        self.max_collision_retries = max_collision_retries
    
    async def create_link(self, destination: str) -> Link:
        """Create and store a new link.
        
        The destination is validated before any connection is taken. If the
        generated hash is already taken, a fresh link is generated and the
        insert retried.
        
        Args:
            destination: Caller-supplied destination URL
            
        Returns:
            The stored link
            
        Raises:
            InvalidUrl: If the destination is not a well-formed absolute URL
            DatabaseError: If storing fails or every retry collides
        """
        link = Link.from_destination(destination, generator=self.generator)
        
        async with self.db.acquire() as conn:
            for attempt in range(self.max_collision_retries + 1):
                try:
                    return await self.queries.insert(conn, link)
                except HashCollision:
                    if attempt == self.max_collision_retries:
                        break
                    self.logger.debug(f"Regenerating link after collision (attempt {attempt + 1})")
                    link = Link.new(link.destination, generator=self.generator)
        
        self.logger.error(
            f"Unable to generate unique hash after {self.max_collision_retries + 1} attempts"
        )
        raise DatabaseError()
    
    async def resolve(self, hash: str) -> Optional[Link]:
        """Look up the link for a hash.
        
        Args:
            hash: The hash to look up
            
        Returns:
            The link or None if not found
        """
        # Anything outside the alphabet can never have been generated
        if not self.generator.is_valid_format(hash):
            self.logger.debug(f"Rejected malformed hash: {hash!r}")
            return None
        
        async with self.db.acquire() as conn:
            link = await self.queries.get_by_hash(conn, hash)
        
        if link is None:
            self.logger.debug(f"Hash not found: {hash}")
        return link
    
    async def list_links(self) -> List[Link]:
        """List all links ordered by destination."""
        async with self.db.acquire() as conn:
            return await self.queries.list(conn)
    
    async def health_check(self) -> bool:
        """Check that a connection can be acquired and queried."""
        try:
            async with self.db.acquire() as conn:
                await self.queries.ping(conn)
        except DatabaseError:
            return False
        return True
    
    async def close(self) -> None:
        """Close service connections."""
        await self.db.close()
