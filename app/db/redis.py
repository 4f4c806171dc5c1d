"""Redis connection for verification tokens, revocations and rate limits."""

import logging

import redis.asyncio as redis
from fastapi import Request

from app.core.config import Settings

logger = logging.getLogger(__name__)


async def connect_redis(settings: Settings) -> redis.Redis:
    """Connect to Redis and return the client."""
    client = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=50,  # Connection pool size
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
        retry_on_timeout=True,
    )

    # Test connection
    try:
        await client.ping()
        logger.info("Connected to Redis: %s", settings.redis_url)
    except Exception:
        logger.exception("Failed to connect to Redis")
        raise

    return client


async def close_redis(client: redis.Redis | None) -> None:
    """Close Redis connection."""
    if client is not None:
        await client.aclose()
        logger.info("Redis connection closed")


def get_redis(request: Request) -> redis.Redis:
    """
    Get the Redis client created at startup.

    Usage:
        @app.get("/")
        async def endpoint(redis: Redis = Depends(get_redis)):
            await redis.get("key")
            ...
    """
    client = getattr(request.app.state, "redis", None)
    if client is None:
        raise RuntimeError("Redis is not connected")
    return client
