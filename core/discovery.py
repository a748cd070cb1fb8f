# core/discovery.py
import logging
from datetime import datetime, timezone
from typing import List, Optional
from core.bucket_keys import discovery_glob, parse_bucket_timestamp, unix_seconds
from repository.trigger_store import TriggerStore
from util.errors import InvalidKeyFormat

logger = logging.getLogger(__name__)


class DiscoveryEngine:
    """
    Finds buckets of `pattern` whose second is <= now (inclusive).

    Malformed keys are skipped and counted by default. With strict=True the
    first malformed key raises InvalidKeyFormat for the whole call.
    """

    def __init__(self, store: TriggerStore, *, strict: bool = False) -> None:
        self._store = store
        self._strict = strict
        self.malformed_keys = 0

    @property
    def strict(self) -> bool:
        return self._strict

    async def discover_ready(
        self, pattern: str, now: Optional[datetime] = None
    ) -> List[str]:
        cutoff = unix_seconds(now or datetime.now(timezone.utc))
        keys = await self._store.list_keys(discovery_glob(pattern))

        ready: List[str] = []
        for key in keys:
            try:
                ts = parse_bucket_timestamp(pattern, key)
            except InvalidKeyFormat:
                if self._strict:
                    raise
                self.malformed_keys += 1
                logger.warning("discover.key.malformed pattern=%s key=%s", pattern, key)
                continue
            if ts <= cutoff:
                ready.append(key)

        logger.debug(
            "discover.done pattern=%s scanned=%d ready=%d", pattern, len(keys), len(ready)
        )
        return ready
