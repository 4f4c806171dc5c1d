"""Auth repository - revoked token IDs in Redis."""

import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.core.exceptions import StoreUnavailableError
from app.core.tokens import TokenClaims

logger = logging.getLogger(__name__)


class TokenRevocationList:
    """
    Set of revoked token IDs (jti).

    Entries live only as long as the token they revoke would have, so the
    set never outgrows the number of live tokens.
    """

    key_prefix = "jwt_revoked"

    def __init__(self, redis: Redis):
        self._redis = redis

    def _key(self, jti: str) -> str:
        return f"{self.key_prefix}:{jti}"

    async def revoke(self, claims: TokenClaims) -> None:
        """Revoke a token until its natural expiry."""
        ttl = claims.remaining_seconds()
        if ttl <= 0:
            return

        try:
            await self._redis.set(self._key(claims.jti), "1", ex=ttl)
        except RedisError as e:
            logger.exception("Failed to revoke token")
            raise StoreUnavailableError() from e

    async def is_revoked(self, jti: str) -> bool:
        """Check whether a token ID has been revoked."""
        try:
            return await self._redis.exists(self._key(jti)) > 0
        except RedisError as e:
            logger.exception("Failed to check token revocation")
            raise StoreUnavailableError() from e
