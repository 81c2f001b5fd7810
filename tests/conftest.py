"""Pytest configuration and fixtures.

The fakes below stand in for an asyncpg pool and connection, keeping rows in
memory so the suite runs without a PostgreSQL server.
"""

import pytest
import asyncpg
from httpx import ASGITransport, AsyncClient

from link_shortener.config import Config
from link_shortener.lib.common.logging_config import setup_logging
from link_shortener.lib.database.postgres import LinkDatabase
from link_shortener.lib.database.queries import LinkQueries, HASH_CONSTRAINT
from link_shortener.lib.service import LinkService
from link_shortener.lib.shortcode import ShortCodeGenerator
from link_shortener.web_app import create_app


def unique_violation(constraint_name: str) -> asyncpg.UniqueViolationError:
    exc = asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
    exc.constraint_name = constraint_name
    return exc


class FakeStore:
    """In-memory stand-in for the links table."""
    
    def __init__(self):
        self.rows = []
        self.executed = []
        self.fail_reads = False
        self.fail_writes = False
        self.forced_collisions = 0
        self.insert_attempts = 0


class FakeConnection:
    """Answers the handful of queries LinkQueries and LinkDatabase send."""
    
    def __init__(self, store: FakeStore):
        self.store = store
    
    async def fetchrow(self, query, *args):
        if query.strip().startswith("INSERT"):
            return self._insert(*args)
        if self.store.fail_reads:
            raise ConnectionResetError("connection reset by peer")
        (hash,) = args
        for row in self.store.rows:
            if row["hash"] == hash:
                return dict(row)
        return None
    
    def _insert(self, link_id, hash, destination):
        self.store.insert_attempts += 1
        if self.store.fail_writes:
            raise ConnectionResetError("connection reset by peer")
        if self.store.forced_collisions > 0:
            self.store.forced_collisions -= 1
            raise unique_violation(HASH_CONSTRAINT)
        for row in self.store.rows:
            if row["id"] == link_id:
                raise unique_violation("links_pkey")
            if row["hash"] == hash:
                raise unique_violation(HASH_CONSTRAINT)
        row = {"id": link_id, "hash": hash, "destination": destination}
        self.store.rows.append(row)
        return dict(row)
    
    async def fetch(self, query, *args):
        if self.store.fail_reads:
            raise ConnectionResetError("connection reset by peer")
        return [dict(row) for row in sorted(self.store.rows, key=lambda r: r["destination"])]
    
    async def fetchval(self, query, *args):
        if self.store.fail_reads:
            raise ConnectionResetError("connection reset by peer")
        return 1
    
    async def execute(self, query, *args):
        if self.store.fail_writes:
            raise ConnectionResetError("connection reset by peer")
        self.store.executed.append(query)
        return "CREATE TABLE"


class FakePool:
    """Counts checkouts so tests can assert every connection is returned."""
    
    def __init__(self, store: FakeStore, acquire_error: Exception = None):
        self.store = store
        self.acquire_error = acquire_error
        self.acquired = 0
        self.released = 0
        self.closed = False
    
    async def acquire(self, timeout=None):
        if self.acquire_error is not None:
            raise self.acquire_error
        self.acquired += 1
        return FakeConnection(self.store)
    
    async def release(self, conn):
        self.released += 1
    
    async def close(self):
        self.closed = True


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Point the config loader at an empty directory."""
    monkeypatch.setenv("APP_CONFIG_DIR", str(tmp_path))
    monkeypatch.delenv("APP_ENV", raising=False)
    return tmp_path


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def pool(store):
    return FakePool(store)


@pytest.fixture
def conn(store):
    return FakeConnection(store)


@pytest.fixture
def test_db(pool, logger):
    """Create test database instance backed by the fake pool."""
    return LinkDatabase(logger=logger, pool=pool)


@pytest.fixture
def queries(logger):
    return LinkQueries(logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=5)


@pytest.fixture
def service(test_db, queries, short_code_generator, logger):
    """Create service instance."""
    return LinkService(
        db=test_db,
        queries=queries,
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def app(service, logger):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=Config(), logger=logger)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
