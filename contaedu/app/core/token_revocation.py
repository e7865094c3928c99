"""
Token Revocation System using Redis.

Blacklists JWT tokens on logout and flags every token of a user once
the user is deleted, so revocation takes effect before token expiry.
"""

import logging
from contaedu.app.core.redis_client import redis_client
from contaedu.app.core.config import settings

logger = logging.getLogger("contaedu.auth")

TOKEN_BLACKLIST_PREFIX = "blacklist:token:"
USER_TOKENS_PREFIX = "user:tokens:"


async def revoke_token(token: str, user_id: int) -> bool:
    """
    Revoke a specific JWT token by adding it to the blacklist.

    Returns:
        True if successfully revoked, False otherwise
    """
    try:
        # Tokens expire on their own, the blacklist entry only has to outlive them
        ttl_seconds = settings.access_token_expire_minutes * 60
        await redis_client.setex(f"{TOKEN_BLACKLIST_PREFIX}{token}", ttl_seconds, str(user_id))
        return True
    except Exception:
        logger.exception("Error revoking token for user %s", user_id)
        return False


async def is_token_revoked(token: str) -> bool:
    try:
        exists = await redis_client.exists(f"{TOKEN_BLACKLIST_PREFIX}{token}")
        return exists > 0
    except Exception:
        # Redis down: fail open
        logger.exception("Error checking token revocation")
        return False


async def revoke_all_user_tokens(user_id: int) -> bool:
    """Flag every token of a user as revoked (used when the user is deleted)."""
    try:
        ttl_seconds = settings.access_token_expire_minutes * 60
        await redis_client.setex(f"{USER_TOKENS_PREFIX}{user_id}:revoked", ttl_seconds, "1")
        return True
    except Exception:
        logger.exception("Error revoking all tokens for user %s", user_id)
        return False


async def are_user_tokens_revoked(user_id: int) -> bool:
    try:
        exists = await redis_client.exists(f"{USER_TOKENS_PREFIX}{user_id}:revoked")
        return exists > 0
    except Exception:
        logger.exception("Error checking user token revocation for user %s", user_id)
        return False
