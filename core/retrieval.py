# core/retrieval.py
import logging
from typing import List
from core.codec import decode
from model.trigger import StoredTrigger, Trigger
from repository.trigger_store import TriggerStore
from util.errors import MalformedRecord

logger = logging.getLogger(__name__)


class RetrievalEngine:
    """
    Flow:
    - SMEMBERS the bucket, decode members in the order Redis returned them.
    - Skip malformed members instead of dropping the whole bucket.
    - Read-only: removal is an explicit writer operation.
    """

    def __init__(self, store: TriggerStore) -> None:
        self._store = store
        self.malformed_records = 0

    async def retrieve(self, key: str) -> List[Trigger]:
        return [m.trigger for m in await self.retrieve_members(key)]

    async def retrieve_members(self, key: str) -> List[StoredTrigger]:
        """Like retrieve(), but keeps the stored bytes for removal by value."""
        members = await self._store.list_members(key)
        out: List[StoredTrigger] = []
        for raw in members:
            try:
                out.append(StoredTrigger(raw=raw, trigger=decode(raw)))
            except MalformedRecord:
                self.malformed_records += 1
                logger.warning("retrieve.member.malformed key=%s bytes=%d", key, len(raw))
                continue
        return out
