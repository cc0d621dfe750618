"""Redis pub/sub — job activity broadcasting.

Learn: Redis pub/sub is fire-and-forget. If no one is listening, the message
is lost. That's fine for live comment/like updates — the page can always
re-fetch from the API. The database stays the source of truth.

Channel naming: jobhub:jobs:{job_id}
Each job detail page subscribes only to its own job's channel.
"""

import json
from typing import Any, Optional

import redis.asyncio as aioredis
import structlog

from jobhub.config import settings

logger = structlog.get_logger()

# Global Redis connection pool (initialized in lifespan)
_redis: Optional[aioredis.Redis] = None


async def init_redis() -> aioredis.Redis:
    """Initialize the Redis connection pool."""
    global _redis
    _redis = aioredis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    # Verify connection
    await _redis.ping()
    return _redis


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def get_redis() -> aioredis.Redis:
    """Get the Redis connection (must be initialized first)."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


def job_channel(job_id: Any) -> str:
    return f"jobhub:jobs:{job_id}"


async def publish_job_event(
    job_id: Any,
    event_type: str,
    data: dict[str, Any],
) -> bool:
    """Publish an event to a job's channel. Returns False if it was dropped.

    Learn: Called after the database commit. Notifications are best
    effort — a Redis outage must not turn a successful write into a 500.
    """
    if _redis is None:
        logger.debug("realtime.publish_skipped", job_id=str(job_id), type=event_type)
        return False

    payload = json.dumps({"type": event_type, "jobId": str(job_id), **data}, default=str)
    try:
        await _redis.publish(job_channel(job_id), payload)
    except aioredis.RedisError as e:
        logger.warning(
            "realtime.publish_failed",
            job_id=str(job_id),
            type=event_type,
            error=str(e),
        )
        return False
    return True
