"""
Token Revocation System using Redis.

Blacklists JWT tokens on logout so they stop working before expiry.
"""

import logging
from redis.exceptions import RedisError
from opsboard.app.core import redis_client as redis_client_module
from opsboard.app.core.config import settings

logger = logging.getLogger("opsboard.auth")

# Redis key prefix for blacklisted tokens
TOKEN_BLACKLIST_PREFIX = "blacklist:token:"


async def revoke_token(token: str, user_id: int) -> bool:
    """
    Revoke a specific JWT token by adding it to the blacklist.

    Returns:
        True if successfully revoked, False otherwise
    """
    client = await redis_client_module.get_redis()
    try:
        # Tokens auto-expire anyway, so the entry only needs to outlive them
        ttl_seconds = settings.access_token_expire_minutes * 60
        await client.set(f"{TOKEN_BLACKLIST_PREFIX}{token}", str(user_id), ex=ttl_seconds)
        return True
    except (RedisError, OSError) as e:
        logger.error("Error revoking token for user %s: %s", user_id, e)
        return False


async def is_token_revoked(token: str) -> bool:
    """
    Check if a token has been revoked.

    Fails open: if Redis is unreachable the token is treated as valid.
    """
    client = await redis_client_module.get_redis()
    try:
        exists = await client.exists(f"{TOKEN_BLACKLIST_PREFIX}{token}")
        return exists > 0
    except (RedisError, OSError) as e:
        logger.warning("Error checking token revocation: %s", e)
        return False
