"""Tests for the Redis set store adapter."""

import asyncio

import pytest
from redis.exceptions import ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from repository.trigger_store import TriggerStore
from util.errors import BackendError, BackendUnavailable


class SlowRedis:
    async def smembers(self, key):
        await asyncio.sleep(1)
        return set()


class BrokenRedis:
    def __init__(self, exc: Exception):
        self.exc = exc

    async def sadd(self, key, value):
        raise self.exc

    async def srem(self, key, value):
        raise self.exc

    async def smembers(self, key):
        raise self.exc

    async def scan_iter(self, match=None, count=None):
        raise self.exc
        yield  # pragma: no cover


class TestTriggerStore:
    @pytest.mark.asyncio
    async def test_add_and_list_members(self, store, redis):
        assert await store.add_member("jobs-1", b"a") is True
        assert await store.add_member("jobs-1", b"b") is True
        assert sorted(await store.list_members("jobs-1")) == [b"a", b"b"]

    @pytest.mark.asyncio
    async def test_duplicate_member_is_deduplicated(self, store):
        assert await store.add_member("jobs-1", b"same") is True
        assert await store.add_member("jobs-1", b"same") is False
        assert await store.list_members("jobs-1") == [b"same"]

    @pytest.mark.asyncio
    async def test_remove_member(self, store, redis):
        await store.add_member("jobs-1", b"a")
        assert await store.remove_member("jobs-1", b"a") is True
        assert await store.remove_member("jobs-1", b"a") is False
        assert await store.list_members("jobs-1") == []
        assert "jobs-1" not in redis.sets

    @pytest.mark.asyncio
    async def test_list_keys_decodes_and_filters(self, store):
        await store.add_member("jobs-1", b"a")
        await store.add_member("jobs-2", b"a")
        await store.add_member("other-1", b"a")
        assert await store.list_keys("jobs-*") == ["jobs-1", "jobs-2"]

    @pytest.mark.asyncio
    async def test_list_keys_dedupes_scan_repeats(self):
        class RepeatingScan:
            async def scan_iter(self, match=None, count=None):
                for k in (b"jobs-2", b"jobs-1", b"jobs-2"):
                    yield k

        store = TriggerStore(RepeatingScan(), timeout_seconds=1.0)
        assert await store.list_keys("jobs-*") == ["jobs-2", "jobs-1"]

    @pytest.mark.asyncio
    async def test_connection_error_is_unavailable(self, store, redis):
        redis.down = True
        with pytest.raises(BackendUnavailable):
            await store.add_member("jobs-1", b"a")
        with pytest.raises(BackendUnavailable):
            await store.list_keys("jobs-*")

    @pytest.mark.asyncio
    async def test_redis_timeout_is_unavailable(self):
        store = TriggerStore(BrokenRedis(RedisTimeoutError("read timeout")))
        with pytest.raises(BackendUnavailable):
            await store.remove_member("jobs-1", b"a")

    @pytest.mark.asyncio
    async def test_response_error_is_backend_error(self):
        store = TriggerStore(BrokenRedis(ResponseError("WRONGTYPE")))
        with pytest.raises(BackendError) as exc:
            await store.list_members("jobs-1")
        assert isinstance(exc.value.__cause__, ResponseError)

    @pytest.mark.asyncio
    async def test_stalled_call_times_out(self):
        store = TriggerStore(SlowRedis(), timeout_seconds=0.01)
        with pytest.raises(BackendUnavailable):
            await store.list_members("jobs-1")
