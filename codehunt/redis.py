"""Optional Redis connection backing the submission rate limiter.

Redis is never required: without ``redis_url`` (or when the server cannot be
reached at startup) the limiter fails open and the hunt keeps running.
"""

from urllib.parse import urlsplit

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from codehunt.config import Settings
from codehunt.logging_config import get_logger

logger = get_logger(__name__)

_client: aioredis.Redis | None = None


def _safe_url(url: str) -> str:
    parts = urlsplit(url)
    host = parts.hostname or ""
    port = f":{parts.port}" if parts.port else ""
    return f"{parts.scheme}://{host}{port}{parts.path}"


def get_redis() -> aioredis.Redis:
    """Connected client; raises RuntimeError when Redis is not in use."""
    if _client is None:
        raise RuntimeError("Redis not connected")
    return _client


async def connect_redis(settings: Settings) -> aioredis.Redis | None:
    """Connect and ping. Returns None when disabled or unreachable."""
    global _client
    if not settings.redis_url:
        return None

    client = aioredis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=2,
        socket_timeout=1,
    )
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        logger.warning("redis_unavailable", url=_safe_url(settings.redis_url), error=str(e))
        await client.aclose()
        return None

    _client = client
    logger.info("redis_connected", url=_safe_url(settings.redis_url))
    return client


async def redis_status() -> str:
    """``disabled``, ``ok`` or ``unreachable``, for the health endpoint."""
    if _client is None:
        return "disabled"
    try:
        await _client.ping()
    except (RedisError, OSError):
        return "unreachable"
    return "ok"


async def disconnect_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
