"""
Redis client initialization.

Redis backs token revocation. The client connects lazily on first use.
"""

import redis.asyncio as redis
from opsboard.app.core.config import settings


# Create async Redis client
redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def get_redis():
    """
    Get Redis client instance.

    Resolved at call time so tests can swap the module-level client.
    """
    return redis_client
