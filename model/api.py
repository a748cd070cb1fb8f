# model/api.py
from datetime import datetime
from pydantic import BaseModel, Field
from model.trigger import Trigger


class TriggerBody(BaseModel):
    namespace: str = Field(min_length=1)
    scheduledAt: datetime
    actionReference: str = Field(min_length=1)

    def to_trigger(self) -> Trigger:
        return Trigger(
            scheduled_at=self.scheduledAt,
            namespace=self.namespace,
            action_reference=self.actionReference,
        )

    @classmethod
    def from_trigger(cls, t: Trigger) -> "TriggerBody":
        return cls(
            namespace=t.namespace,
            scheduledAt=t.scheduled_at,
            actionReference=t.action_reference,
        )


class AddTriggerResponse(BaseModel):
    key: str


class RemoveTriggerResponse(BaseModel):
    removed: bool


class RescheduleRequest(BaseModel):
    trigger: TriggerBody
    scheduledAt: datetime


class RescheduleResponse(BaseModel):
    key: str
    trigger: TriggerBody


class ReadyBucketResponse(BaseModel):
    key: str
    scheduledAt: int
    triggers: list[TriggerBody]


class PollerStatsResponse(BaseModel):
    pattern: str
    running: bool
    cycles: int
    readyKeys: int
    triggers: int
    errors: int
    malformedKeys: int
    malformedRecords: int
    lastCycleAt: int | None = None
