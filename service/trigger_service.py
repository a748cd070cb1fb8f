# service/trigger_service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional
from core.bucket_keys import bucket_key, parse_bucket_timestamp
from core.codec import encode
from core.discovery import DiscoveryEngine
from core.retrieval import RetrievalEngine
from model.trigger import ReadyBucket, Trigger
from repository.trigger_store import TriggerStore

logger = logging.getLogger(__name__)


class TriggerService:
    def __init__(
        self,
        store: TriggerStore,
        discovery: DiscoveryEngine,
        retrieval: RetrievalEngine,
    ) -> None:
        self._store = store
        self._discovery = discovery
        self._retrieval = retrieval

    async def add_trigger(self, trigger: Trigger) -> str:
        """
        SADD the encoded record into its bucket. Returns the bucket key.
        Re-adding an identical record is a no-op (set semantics).
        """
        key = bucket_key(trigger.namespace, trigger.scheduled_at)
        added = await self._store.add_member(key, encode(trigger))
        logger.info(
            "trigger.add key=%s action=%s new=%s", key, trigger.action_reference, added
        )
        return key

    async def remove_trigger(self, trigger: Trigger, key: Optional[str] = None) -> bool:
        key = key or bucket_key(trigger.namespace, trigger.scheduled_at)
        removed = await self._store.remove_member(key, encode(trigger))
        logger.info(
            "trigger.remove key=%s action=%s removed=%s",
            key,
            trigger.action_reference,
            removed,
        )
        return removed

    async def reschedule(self, trigger: Trigger, at: datetime) -> Trigger:
        """
        Records are immutable: remove the old member, add a copy due at `at`.
        Not atomic; a crash in between loses the trigger.
        """
        moved = trigger.rescheduled(at)
        await self.remove_trigger(trigger)
        await self.add_trigger(moved)
        return moved

    async def ready(
        self, pattern: str, now: Optional[datetime] = None
    ) -> List[ReadyBucket]:
        """One observe-only discovery + retrieval pass; nothing is removed."""
        now = now or datetime.now(timezone.utc)
        out: List[ReadyBucket] = []
        for key in await self._discovery.discover_ready(pattern, now):
            members = await self._retrieval.retrieve_members(key)
            if not members:
                continue
            out.append(
                ReadyBucket(
                    key=key,
                    scheduled_at=parse_bucket_timestamp(pattern, key),
                    members=members,
                )
            )
        return out
