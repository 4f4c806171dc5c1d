"""Email verification token store backed by Redis."""

import logging
import secrets
from datetime import timedelta

from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.core.exceptions import StoreUnavailableError, VerificationTokenNotFoundError

logger = logging.getLogger(__name__)

VERIFICATION_TOKEN_BYTES = 32
VERIFICATION_TOKEN_TTL = timedelta(hours=24)


class EmailVerificationStore:
    """
    Issues and redeems single-use email verification tokens.

    Each token maps to one email under ``email_verify:<token>`` and expires
    on its own through the Redis TTL. Redemption is a single GETDEL, so two
    concurrent redemptions of the same token cannot both succeed.
    """

    key_prefix = "email_verify"

    def __init__(self, redis: Redis, ttl: timedelta = VERIFICATION_TOKEN_TTL):
        self._redis = redis
        self._ttl = ttl

    def _key(self, token: str) -> str:
        return f"{self.key_prefix}:{token}"

    async def issue(self, email: str) -> str:
        """
        Create a verification token for an email.

        Earlier tokens for the same email stay valid until used or expired.

        Returns:
            64-character hex token

        Raises:
            StoreUnavailableError: If Redis cannot be reached
        """
        token = secrets.token_hex(VERIFICATION_TOKEN_BYTES)
        try:
            await self._redis.set(self._key(token), email, px=self._ttl)
        except RedisError as e:
            logger.exception("Failed to store verification token")
            raise StoreUnavailableError() from e
        return token

    async def redeem(self, token: str) -> str:
        """
        Consume a verification token and return its email.

        Raises:
            VerificationTokenNotFoundError: If the token is unknown, already
                redeemed or expired
            StoreUnavailableError: If Redis cannot be reached
        """
        try:
            email = await self._redis.getdel(self._key(token))
        except RedisError as e:
            logger.exception("Failed to redeem verification token")
            raise StoreUnavailableError() from e

        if email is None:
            raise VerificationTokenNotFoundError()

        if isinstance(email, bytes):
            email = email.decode("utf-8")
        return email
