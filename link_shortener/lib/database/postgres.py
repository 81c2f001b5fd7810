"""PostgreSQL connection pool for the link shortener."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg

from ...config import DatabaseConfig
from ..exceptions import DatabaseError


# Everything the driver or the network can throw at us
DATASTORE_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    asyncio.TimeoutError,
    OSError,
)


class LinkDatabase:
    """Owns the asyncpg pool and hands out connections one checkout at a time."""
    
    # Table creation SQL
    CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS links (
        id UUID PRIMARY KEY,
        hash TEXT NOT NULL UNIQUE,
        destination TEXT NOT NULL
    );
    """
    
    def __init__(
        self,
        config: Optional[DatabaseConfig] = None,
        logger: Optional[logging.Logger] = None,
        pool: Optional[asyncpg.Pool] = None,
    ):
        """Initialize the database wrapper.
        
        The pool is created lazily on first use unless one is passed in.
        
        Args:
            config: Database settings (defaults apply if omitted)
            logger: Optional logger instance
            pool: Optional pre-built pool
        """
        self.config = config or DatabaseConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.acquire_timeout = self.config.connect_timeout_seconds
        
        self._pool = pool
        self._pool_lock = asyncio.Lock()
    
    async def _get_pool(self) -> asyncpg.Pool:
        """Get or create the connection pool."""
        if self._pool is None:
            async with self._pool_lock:
                if self._pool is None:
                    self.logger.debug(
                        f"Creating connection pool "
                        f"(min={self.config.min_connections}, max={self.config.max_connections})"
                    )
                    try:
                        self._pool = await asyncpg.create_pool(
                            dsn=self.config.url.get_secret_value(),
                            min_size=min(self.config.min_connections, self.config.max_connections),
                            max_size=self.config.max_connections,
                            max_queries=self.config.max_queries,
                            max_inactive_connection_lifetime=self.config.idle_timeout_seconds,
                            timeout=self.config.connect_timeout_seconds,
                            command_timeout=self.config.connect_timeout_seconds,
                        )
                    except DATASTORE_ERRORS as e:
                        self.logger.error(f"Error creating connection pool: {e}")
                        raise DatabaseError() from e
                    self.logger.debug("Connection pool created")
        
        return self._pool
    
    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Check out a connection, returning it to the pool on every exit path.
        
        Raises:
            DatabaseError: If no connection could be acquired in time
        """
        pool = await self._get_pool()
        
        try:
            conn = await pool.acquire(timeout=self.acquire_timeout)
        except DATASTORE_ERRORS as e:
            self.logger.error(f"Error acquiring database connection: {e!r}")
            raise DatabaseError() from e
        
        try:
            yield conn
        finally:
            await pool.release(conn)
    
    async def connect(self) -> None:
        """Open the pool and create the schema if configured to."""
        await self._get_pool()
        if self.config.create_tables:
            await self.ensure_schema()
    
    async def ensure_schema(self) -> None:
        """Create the links table if it does not exist."""
        self.logger.info("Creating links table if not exists...")
        async with self.acquire() as conn:
            try:
                await conn.execute(self.CREATE_TABLE_SQL)
            except DATASTORE_ERRORS as e:
                self.logger.error(f"Error creating tables: {e}")
                raise DatabaseError() from e
        self.logger.info("Table creation completed successfully")
    
    async def close(self) -> None:
        """Close all database connections."""
        if self._pool is None:
            return
        
        try:
            await self._pool.close()
            self.logger.debug("Closed connection pool")
        finally:
            self._pool = None
