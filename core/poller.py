# core/poller.py
import asyncio
import inspect
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Union
from core.bucket_keys import parse_bucket_timestamp
from core.discovery import DiscoveryEngine
from core.retrieval import RetrievalEngine
from model.trigger import ReadyBucket
from util.errors import TriggerError
from util.timing import timed

logger = logging.getLogger(__name__)

ReadyHandler = Callable[[ReadyBucket], Union[None, Awaitable[None]]]


@dataclass
class PollStats:
    cycles: int = 0
    ready_keys: int = 0
    triggers: int = 0
    errors: int = 0
    last_cycle_at: Optional[int] = None


class Poller:
    """
    Idle -> Polling -> Idle until stop().

    Each cycle: discover ready buckets, retrieve each one, hand non-empty
    buckets to `on_ready`. Errors are logged and counted, never raised out of
    run(); a dead backend means one error per tick, not a crash.
    Delivery is at-least-once: a bucket nobody removes is seen again next tick.
    """

    def __init__(
        self,
        discovery: DiscoveryEngine,
        retrieval: RetrievalEngine,
        *,
        pattern: str,
        interval_seconds: float = 1.0,
        on_ready: Optional[ReadyHandler] = None,
    ) -> None:
        self._discovery = discovery
        self._retrieval = retrieval
        self._pattern = pattern
        self._interval = float(interval_seconds)
        self._on_ready = on_ready
        self._stop = asyncio.Event()
        self._running = False
        self.stats = PollStats()

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def discovery(self) -> DiscoveryEngine:
        return self._discovery

    @property
    def retrieval(self) -> RetrievalEngine:
        return self._retrieval

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        self._stop.set()

    async def run(self) -> None:
        self._running = True
        logger.info("poll.start pattern=%s interval=%.2fs", self._pattern, self._interval)
        try:
            while not self._stop.is_set():
                try:
                    await self.poll_once()
                except Exception:
                    self.stats.errors += 1
                    logger.exception("poll.cycle.error pattern=%s", self._pattern)
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=self._interval)
                except asyncio.TimeoutError:
                    pass
        finally:
            self._running = False
            logger.info("poll.stop pattern=%s cycles=%d", self._pattern, self.stats.cycles)

    async def poll_once(self, now: Optional[datetime] = None) -> List[ReadyBucket]:
        now = now or datetime.now(timezone.utc)
        self.stats.cycles += 1
        self.stats.last_cycle_at = int(time.time())

        with timed(logger, "poll.cycle", pattern=self._pattern):
            try:
                keys = await self._discovery.discover_ready(self._pattern, now)
            except TriggerError as e:
                self.stats.errors += 1
                logger.error("poll.discover.error pattern=%s err=%s", self._pattern, e)
                return []

            buckets: List[ReadyBucket] = []
            for key in keys:
                if self._stop.is_set():
                    break
                try:
                    members = await self._retrieval.retrieve_members(key)
                except TriggerError as e:
                    self.stats.errors += 1
                    logger.error("poll.retrieve.error key=%s err=%s", key, e)
                    continue
                if not members:
                    continue

                bucket = ReadyBucket(
                    key=key,
                    scheduled_at=parse_bucket_timestamp(self._pattern, key),
                    members=members,
                )
                buckets.append(bucket)
                self.stats.ready_keys += 1
                self.stats.triggers += len(members)
                await self._hand_off(bucket)

        if buckets:
            logger.info(
                "poll.cycle.ready keys=%d triggers=%d",
                len(buckets),
                sum(len(b.members) for b in buckets),
            )
        return buckets

    async def _hand_off(self, bucket: ReadyBucket) -> None:
        if self._on_ready is None:
            return
        try:
            res = self._on_ready(bucket)
            if inspect.isawaitable(res):
                await res
        except Exception:
            self.stats.errors += 1
            logger.exception("poll.handler.error key=%s", bucket.key)
