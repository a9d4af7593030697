"""
Tests du store de session diskcache.
"""

import time

import pytest

from orderflow.adapters.session import DiskCacheSessionStore


@pytest.fixture
def store(tmp_path):
    store = DiskCacheSessionStore(tmp_path / "sessions", default_ttl=60)
    yield store
    store.close()


class TestDiskCacheSessionStore:
    @pytest.mark.asyncio
    async def test_set_get_pop(self, store: DiskCacheSessionStore) -> None:
        await store.set("u1", "email_token", "abc")

        assert await store.get("u1", "email_token") == "abc"
        assert await store.pop("u1", "email_token") == "abc"
        assert await store.get("u1", "email_token") is None
        assert await store.pop("u1", "email_token") is None

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(self, store: DiskCacheSessionStore) -> None:
        await store.set("u1", "k", 1)
        await store.set("u2", "k", 2)

        assert await store.get("u1", "k") == 1
        assert await store.get("u2", "k") == 2

    @pytest.mark.asyncio
    async def test_clear_removes_only_the_session(self, store: DiskCacheSessionStore) -> None:
        await store.set("u1", "a", 1)
        await store.set("u1", "b", 2)
        await store.set("u2", "a", 3)

        removed = await store.clear("u1")

        assert removed == 2
        assert await store.get("u1", "a") is None
        assert await store.get("u2", "a") == 3

    @pytest.mark.asyncio
    async def test_entries_expire(self, store: DiskCacheSessionStore) -> None:
        await store.set("u1", "short", "x", ttl=1)
        time.sleep(1.1)
        assert await store.get("u1", "short") is None

    @pytest.mark.asyncio
    async def test_values_survive_reopening(self, tmp_path) -> None:
        first = DiskCacheSessionStore(tmp_path / "persist")
        await first.set("u1", "k", {"nested": [1, 2]})
        first.close()

        second = DiskCacheSessionStore(tmp_path / "persist")
        try:
            assert await second.get("u1", "k") == {"nested": [1, 2]}
        finally:
            second.close()
