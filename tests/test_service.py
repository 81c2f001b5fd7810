"""Tests for service layer."""

import asyncio

import pytest

from link_shortener.lib.database.postgres import LinkDatabase
from link_shortener.lib.exceptions import DatabaseError, InvalidUrl
from link_shortener.lib.service import LinkService
from link_shortener.lib.shortcode import ShortCodeGenerator

from conftest import FakePool, FakeStore


class TestLinkService:
    """Test link service."""
    
    @pytest.mark.asyncio
    async def test_create_link(self, service, sample_urls):
        """Test creating a link."""
        link = await service.create_link(sample_urls[0])
        
        assert link.destination == sample_urls[0]
        assert len(link.hash) == 5
    
    @pytest.mark.asyncio
    async def test_create_link_normalizes(self, service):
        link = await service.create_link("https://www.google.com")
        assert link.destination == "https://www.google.com/"
    
    @pytest.mark.asyncio
    async def test_invalid_url_never_touches_database(self, service, pool, store):
        """Test invalid URL rejection."""
        with pytest.raises(InvalidUrl):
            await service.create_link("not a url")
        
        assert pool.acquired == 0
        assert store.rows == []
    
    @pytest.mark.asyncio
    async def test_resolve(self, service, sample_urls):
        """Test getting a link by hash."""
        link = await service.create_link(sample_urls[0])
        
        assert await service.resolve(link.hash) == link
    
    @pytest.mark.asyncio
    async def test_resolve_nonexistent(self, service):
        """Test getting nonexistent hash."""
        assert await service.resolve("nope0") is None
    
    @pytest.mark.asyncio
    async def test_resolve_failure_propagates(self, service, store):
        store.fail_reads = True
        
        with pytest.raises(DatabaseError):
            await service.resolve("abcde")
    
    @pytest.mark.asyncio
    async def test_two_creates_then_list(self, service):
        first = await service.create_link("https://b.example.com/")
        second = await service.create_link("https://a.example.com/")
        
        assert first.id != second.id
        assert await service.list_links() == [second, first]
    
    @pytest.mark.asyncio
    async def test_list_fails_soft(self, service, store):
        await service.create_link("https://example.com/")
        store.fail_reads = True
        
        assert await service.list_links() == []
    
    @pytest.mark.asyncio
    async def test_collision_is_retried(self, service, store):
        store.forced_collisions = 2
        
        link = await service.create_link("https://example.com/")
        
        assert store.insert_attempts == 3
        assert store.rows[0]["hash"] == link.hash
        assert link.destination == "https://example.com/"
    
    @pytest.mark.asyncio
    async def test_collision_retries_are_bounded(self, test_db, store, logger):
        service = LinkService(db=test_db, logger=logger, max_collision_retries=1)
        store.forced_collisions = 5
        
        with pytest.raises(DatabaseError):
            await service.create_link("https://example.com/")
        assert store.insert_attempts == 2
        assert store.rows == []
    
    @pytest.mark.asyncio
    async def test_insert_failure_releases_connection(self, service, pool, store):
        store.fail_writes = True
        
        with pytest.raises(DatabaseError):
            await service.create_link("https://example.com/")
        assert pool.acquired == pool.released == 1
    
    @pytest.mark.asyncio
    async def test_health_check(self, service, store):
        """Test health check."""
        assert await service.health_check()
        
        store.fail_reads = True
        assert not await service.health_check()
    
    @pytest.mark.asyncio
    async def test_health_check_without_connection(self, logger):
        db = LinkDatabase(logger=logger, pool=FakePool(FakeStore(), acquire_error=asyncio.TimeoutError()))
        service = LinkService(db=db, logger=logger)
        
        assert not await service.health_check()
    
    @pytest.mark.asyncio
    async def test_close(self, service, pool):
        await service.close()
        assert pool.closed
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("hash", ["\x00", "ab-cd", "ab cd", ""])
    async def test_resolve_malformed_hash_skips_database(self, service, pool, hash):
        assert await service.resolve(hash) is None
        assert pool.acquired == 0
    
    @pytest.mark.asyncio
    async def test_no_link_generated_after_last_collision(self, test_db, store, logger):
        class CountingGenerator(ShortCodeGenerator):
            generated = 0
            
            def generate_from_uuid(self, link_id, length=None):
                CountingGenerator.generated += 1
                return super().generate_from_uuid(link_id, length)
        
        service = LinkService(
            db=test_db,
            short_code_generator=CountingGenerator(),
            logger=logger,
            max_collision_retries=2,
        )
        store.forced_collisions = 10
        
        with pytest.raises(DatabaseError):
            await service.create_link("https://example.com/")
        
        assert store.insert_attempts == 3
        assert CountingGenerator.generated == 3
