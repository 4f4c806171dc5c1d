"""Email verification service - send and confirm verification tokens."""

import logging
from datetime import datetime, timezone

from app.core.exceptions import EmailAlreadyVerifiedError, NotFoundError
from app.domains.user.models import UserPublic
from app.domains.user.repository import UserRepositoryInterface
from app.domains.verification.repository import EmailVerificationStore

logger = logging.getLogger(__name__)


class EmailVerificationService:
    """Issues verification tokens for users and marks their email verified."""

    def __init__(self, users: UserRepositoryInterface, store: EmailVerificationStore):
        self._users = users
        self._store = store

    async def send(self, user_id: str) -> str:
        """
        Issue a verification token for the user's email.

        Raises:
            NotFoundError: If the user does not exist
            EmailAlreadyVerifiedError: If the email is already verified
        """
        user = await self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        if user.email_verified:
            raise EmailAlreadyVerifiedError()

        token = await self._store.issue(user.email)

        # TODO: hand the token to the mail sender once one is configured
        logger.info("Verification token issued for user %s", user.id)
        return token

    async def verify(self, token: str) -> UserPublic:
        """
        Redeem a verification token and mark the owning email verified.

        Raises:
            VerificationTokenNotFoundError: If the token is invalid or expired
            NotFoundError: If no user owns the email anymore
        """
        email = await self._store.redeem(token)

        user = await self._users.find_by_email(email)
        if user is None:
            raise NotFoundError("User")

        updated = await self._users.update_fields(
            user.id,
            {"email_verified": True, "verified_at": datetime.now(timezone.utc)},
        )
        if updated is None:
            raise NotFoundError("User", user.id)

        logger.info("Email verified for user %s", user.id)
        return updated.to_public()
