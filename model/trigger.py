# model/trigger.py
import math
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Trigger(BaseModel):
    """
    One unit of scheduled work.
    - Identity is the encoded bytes: equal fields -> same set member.
    - Frozen; rescheduling builds a new record.
    """

    model_config = ConfigDict(frozen=True)

    scheduled_at: datetime
    namespace: str = Field(min_length=1)
    action_reference: str = Field(min_length=1)

    @field_validator("scheduled_at", mode="before")
    @classmethod
    def _from_epoch(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            try:
                return datetime.fromtimestamp(math.floor(v), tz=timezone.utc)
            except (OverflowError, OSError) as e:
                raise ValueError(f"epoch out of range: {v}") from e
        return v

    @field_validator("scheduled_at")
    @classmethod
    def _utc_seconds(cls, v: datetime) -> datetime:
        # Buckets are whole seconds; naive values are read as UTC.
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        try:
            return v.astimezone(timezone.utc).replace(microsecond=0)
        except OverflowError as e:
            raise ValueError(f"date out of range in UTC: {v.isoformat()}") from e

    def rescheduled(self, at: datetime) -> "Trigger":
        return Trigger(
            scheduled_at=at,
            namespace=self.namespace,
            action_reference=self.action_reference,
        )


class StoredTrigger(BaseModel):
    """A decoded trigger plus the exact member bytes it was read from."""

    raw: bytes
    trigger: Trigger


class ReadyBucket(BaseModel):
    key: str
    scheduled_at: int
    members: list[StoredTrigger] = Field(default_factory=list)

    @property
    def triggers(self) -> list[Trigger]:
        return [m.trigger for m in self.members]
