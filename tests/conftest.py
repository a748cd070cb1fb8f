"""Shared fixtures: an in-memory Redis stand-in and wired-up components."""

import fnmatch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from core.discovery import DiscoveryEngine
from core.retrieval import RetrievalEngine
from repository.trigger_store import TriggerStore
from service.trigger_service import TriggerService


class InMemoryRedis:
    """Just the set/scan commands the trigger store uses.

    Keys are stored in insertion order; empty sets are pruned like Redis does.
    """

    def __init__(self) -> None:
        self.sets: dict[str, set[bytes]] = {}
        self.down = False

    def _check(self) -> None:
        if self.down:
            raise RedisConnectionError("Connection refused")

    @staticmethod
    def _b(value) -> bytes:
        return value if isinstance(value, bytes) else str(value).encode("utf-8")

    async def sadd(self, key: str, *values) -> int:
        self._check()
        members = self.sets.setdefault(key, set())
        before = len(members)
        members.update(self._b(v) for v in values)
        return len(members) - before

    async def srem(self, key: str, *values) -> int:
        self._check()
        members = self.sets.get(key, set())
        removed = 0
        for v in values:
            if self._b(v) in members:
                members.discard(self._b(v))
                removed += 1
        if key in self.sets and not members:
            del self.sets[key]
        return removed

    async def smembers(self, key: str) -> set[bytes]:
        self._check()
        return set(self.sets.get(key, set()))

    async def scan_iter(self, match: str = "*", count: int | None = None):
        self._check()
        for key in list(self.sets):
            if fnmatch.fnmatchcase(key, match):
                yield key.encode("utf-8")


@pytest.fixture
def redis() -> InMemoryRedis:
    return InMemoryRedis()


@pytest.fixture
def store(redis: InMemoryRedis) -> TriggerStore:
    return TriggerStore(redis, timeout_seconds=1.0, scan_count=10)


@pytest.fixture
def discovery(store: TriggerStore) -> DiscoveryEngine:
    return DiscoveryEngine(store)


@pytest.fixture
def retrieval(store: TriggerStore) -> RetrievalEngine:
    return RetrievalEngine(store)


@pytest.fixture
def service(
    store: TriggerStore, discovery: DiscoveryEngine, retrieval: RetrievalEngine
) -> TriggerService:
    return TriggerService(store, discovery, retrieval)
