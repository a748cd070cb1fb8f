# main.py
import asyncio
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
import routes
from config.cache import close_redis, create_redis
from config.settings import settings
from core.actions import ActionRegistry, TriggerDispatcher
from core.discovery import DiscoveryEngine
from core.poller import Poller
from core.retrieval import RetrievalEngine
from model.trigger import Trigger
from repository.trigger_store import TriggerStore
from service.trigger_service import TriggerService
from util.enums import Color, Environment
from util.logger import init_logger

logger = logging.getLogger(__name__)

# Populated at import time; records only carry these names.
registry = ActionRegistry()


@registry.action("log")
def log_trigger(trigger: Trigger) -> None:
    logger.info(
        "action.log ns=%s at=%s", trigger.namespace, trigger.scheduled_at.isoformat()
    )


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    init_logger()
    print(f"{Color.GREEN}Initializing...{Color.RESET}")
    try:
        redis = await create_redis(settings.REDIS_URL)
    except Exception as e:
        print("Failed to connect to Redis:", e)
        raise

    store = TriggerStore(redis)
    discovery = DiscoveryEngine(store, strict=settings.DISCOVERY_STRICT)
    retrieval = RetrievalEngine(store)
    fastApi.state.redis = redis
    fastApi.state.trigger_service = TriggerService(store, discovery, retrieval)

    poller = None
    task = None
    if settings.POLLER_ENABLED:
        poller = Poller(
            discovery,
            retrieval,
            pattern=settings.TRIGGER_NAMESPACE,
            interval_seconds=settings.POLL_INTERVAL_SECONDS,
            on_ready=TriggerDispatcher(
                registry,
                store,
                remove_after_dispatch=settings.REMOVE_AFTER_DISPATCH,
            ),
        )
        task = asyncio.create_task(poller.run(), name="trigger-poller")
    fastApi.state.poller = poller
    print(f"{Color.BLUE}Server Started{Color.RESET}")

    try:
        yield
    finally:
        if poller is not None and task is not None:
            poller.stop()
            try:
                await asyncio.wait_for(task, timeout=settings.BACKEND_TIMEOUT_SECONDS)
            except asyncio.TimeoutError:
                logger.warning("poll.shutdown.timeout; cancelling")
            except Exception:
                logger.exception("poll.shutdown.error")
        try:
            await close_redis(redis)
        except Exception as e:
            print("Error closing Redis:", e)

        print(f"{Color.RED}Server Shutdown{Color.RESET}")


app: FastAPI = FastAPI(lifespan=lifespan)


@app.get("/healthz")
async def healthz():
    poller = getattr(app.state, "poller", None)
    return {"ok": True, "poller": bool(poller and poller.running)}


routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=reload)
