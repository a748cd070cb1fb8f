# config/cache.py
from redis.asyncio import Redis, from_url


async def create_redis(url: str) -> Redis:
    """
    Build one client per process; the caller owns it and must close_redis() it.
    Members are raw bytes, so responses are not decoded.
    """
    client = from_url(
        url,
        encoding="utf-8",
        decode_responses=False,
        socket_keepalive=True,
        health_check_interval=30,
    )
    # Fail fast on startup if Redis is unreachable.
    await client.ping()
    return client


async def close_redis(client: Redis | None) -> None:
    if client is not None:
        await client.aclose()
