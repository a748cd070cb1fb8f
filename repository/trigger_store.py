# repository/trigger_store.py
import asyncio
import logging
from typing import Awaitable, List, TypeVar
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError
from config.settings import settings
from util.errors import BackendError, BackendUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TriggerStore:
    """
    Thin pass-through over Redis sets.
    - One bucket = one SET keyed "<namespace>-<unix_seconds>".
    - Every call is bounded by a timeout; transport failures surface as
      BackendUnavailable, server errors as BackendError. No retries.
    """

    def __init__(
        self,
        client: Redis,
        timeout_seconds: float = settings.BACKEND_TIMEOUT_SECONDS,
        scan_count: int = settings.SCAN_COUNT,
    ) -> None:
        self._client = client
        self._timeout = float(timeout_seconds)
        self._scan_count = int(scan_count)

    async def _call(self, op: str, aw: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(aw, timeout=self._timeout)
        except (asyncio.TimeoutError, RedisConnectionError, RedisTimeoutError) as e:
            raise BackendUnavailable(f"{op}: {str(e) or type(e).__name__}") from e
        except RedisError as e:
            raise BackendError(f"{op}: {e}") from e

    async def add_member(self, key: str, value: bytes) -> bool:
        return bool(await self._call("sadd", self._client.sadd(key, value)))

    async def remove_member(self, key: str, value: bytes) -> bool:
        return bool(await self._call("srem", self._client.srem(key, value)))

    async def list_members(self, key: str) -> List[bytes]:
        members = await self._call("smembers", self._client.smembers(key))
        return list(members or [])

    async def list_keys(self, glob_pattern: str) -> List[str]:
        """
        SCAN MATCH instead of KEYS so a large keyspace is never blocked.
        SCAN may repeat keys; first occurrence wins, enumeration order kept.
        """
        return await self._call("scan", self._scan(glob_pattern))

    async def _scan(self, glob_pattern: str) -> List[str]:
        seen: dict[str, None] = {}
        async for raw in self._client.scan_iter(
            match=glob_pattern, count=self._scan_count
        ):
            # Undecodable bytes become U+FFFD and fail bucket parsing downstream.
            key = (
                raw.decode("utf-8", errors="replace")
                if isinstance(raw, (bytes, bytearray))
                else str(raw)
            )
            seen.setdefault(key, None)
        logger.debug("store.scan match=%s keys=%d", glob_pattern, len(seen))
        return list(seen)
