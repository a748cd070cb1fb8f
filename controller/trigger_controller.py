# controller/trigger_controller.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from config.settings import settings
from core.bucket_keys import bucket_key
from core.poller import Poller
from model.api import (
    AddTriggerResponse,
    PollerStatsResponse,
    ReadyBucketResponse,
    RemoveTriggerResponse,
    RescheduleRequest,
    RescheduleResponse,
    TriggerBody,
)
from service.trigger_service import TriggerService
from util.constants import InternalURIs
from util.enums import ErrorMessage
from util.errors import AppError, TriggerError
from controller.controller_dependencies import (
    get_poller,
    get_trigger_service,
    to_app_error,
)

trigger_router = APIRouter()


@trigger_router.post(
    InternalURIs.TRIGGERS,
    response_model=AddTriggerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_trigger(
    payload: TriggerBody,
    service: TriggerService = Depends(get_trigger_service),
) -> AddTriggerResponse:
    try:
        key = await service.add_trigger(payload.to_trigger())
    except TriggerError as e:
        raise to_app_error(e) from e
    return AddTriggerResponse(key=key)


@trigger_router.post(InternalURIs.CANCEL_TRIGGER, response_model=RemoveTriggerResponse)
async def cancel_trigger(
    payload: TriggerBody,
    service: TriggerService = Depends(get_trigger_service),
) -> RemoveTriggerResponse:
    try:
        removed = await service.remove_trigger(payload.to_trigger())
    except TriggerError as e:
        raise to_app_error(e) from e
    return RemoveTriggerResponse(removed=removed)


@trigger_router.post(InternalURIs.RESCHEDULE_TRIGGER, response_model=RescheduleResponse)
async def reschedule_trigger(
    payload: RescheduleRequest,
    service: TriggerService = Depends(get_trigger_service),
) -> RescheduleResponse:
    try:
        moved = await service.reschedule(payload.trigger.to_trigger(), payload.scheduledAt)
    except TriggerError as e:
        raise to_app_error(e) from e
    return RescheduleResponse(
        key=bucket_key(moved.namespace, moved.scheduled_at),
        trigger=TriggerBody.from_trigger(moved),
    )


@trigger_router.get(InternalURIs.READY_TRIGGERS, response_model=list[ReadyBucketResponse])
async def ready_triggers(
    namespace: str = Query(default=settings.TRIGGER_NAMESPACE, min_length=1),
    service: TriggerService = Depends(get_trigger_service),
) -> list[ReadyBucketResponse]:
    # Observe-only: buckets stay in place until cancelled or dispatched.
    try:
        buckets = await service.ready(namespace)
    except TriggerError as e:
        raise to_app_error(e) from e
    return [
        ReadyBucketResponse(
            key=b.key,
            scheduledAt=b.scheduled_at,
            triggers=[TriggerBody.from_trigger(t) for t in b.triggers],
        )
        for b in buckets
    ]


@trigger_router.get(InternalURIs.POLLER_STATS, response_model=PollerStatsResponse)
async def poller_stats(
    poller: Optional[Poller] = Depends(get_poller),
) -> PollerStatsResponse:
    if poller is None:
        info = ErrorMessage.POLLER_DISABLED.value
        raise AppError(info.message, info.http_status)
    s = poller.stats
    return PollerStatsResponse(
        pattern=poller.pattern,
        running=poller.running,
        cycles=s.cycles,
        readyKeys=s.ready_keys,
        triggers=s.triggers,
        errors=s.errors,
        malformedKeys=poller.discovery.malformed_keys,
        malformedRecords=poller.retrieval.malformed_records,
        lastCycleAt=s.last_cycle_at,
    )
