# core/actions.py
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Union
from model.trigger import ReadyBucket, Trigger
from repository.trigger_store import TriggerStore
from util.errors import TriggerError, UnknownAction

logger = logging.getLogger(__name__)

ActionHandler = Callable[[Trigger], Union[Any, Awaitable[Any]]]


class ActionRegistry:
    """
    action_reference -> handler table, filled once at startup.
    Records only ever carry the reference string.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, ActionHandler] = {}

    def register(self, name: str, handler: ActionHandler) -> None:
        if not name:
            raise ValueError("action name must be non-empty")
        if name in self._handlers:
            raise ValueError(f"action {name!r} already registered")
        self._handlers[name] = handler

    def action(self, name: str) -> Callable[[ActionHandler], ActionHandler]:
        def deco(fn: ActionHandler) -> ActionHandler:
            self.register(name, fn)
            return fn

        return deco

    def resolve(self, name: str) -> ActionHandler:
        try:
            return self._handlers[name]
        except KeyError:
            raise UnknownAction(name) from None

    def names(self) -> List[str]:
        return sorted(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers


class TriggerDispatcher:
    """
    Poller on_ready handler.
    - Runs each trigger's action in bucket order.
    - On success (and remove_after_dispatch) SREMs that exact member, so a
      trigger is only dropped after its action ran.
    - Unknown actions and failing handlers leave the member in place; it will
      be picked up again next cycle.
    """

    def __init__(
        self,
        registry: ActionRegistry,
        store: TriggerStore,
        *,
        remove_after_dispatch: bool = True,
    ) -> None:
        self._registry = registry
        self._store = store
        self._remove = remove_after_dispatch
        self.dispatched = 0
        self.failed = 0

    async def __call__(self, bucket: ReadyBucket) -> None:
        for member in bucket.members:
            trigger = member.trigger
            if await self._run(trigger, bucket.key) and self._remove:
                try:
                    await self._store.remove_member(bucket.key, member.raw)
                except TriggerError as e:
                    logger.error(
                        "dispatch.remove.error key=%s action=%s err=%s",
                        bucket.key,
                        trigger.action_reference,
                        e,
                    )

    async def _run(self, trigger: Trigger, key: str) -> bool:
        try:
            handler = self._registry.resolve(trigger.action_reference)
        except UnknownAction:
            self.failed += 1
            logger.warning(
                "dispatch.action.unknown key=%s action=%s", key, trigger.action_reference
            )
            return False

        try:
            res = handler(trigger)
            if inspect.isawaitable(res):
                await res
        except Exception:
            self.failed += 1
            logger.exception(
                "dispatch.action.error key=%s action=%s", key, trigger.action_reference
            )
            return False

        self.dispatched += 1
        logger.info("dispatch.ok key=%s action=%s", key, trigger.action_reference)
        return True
