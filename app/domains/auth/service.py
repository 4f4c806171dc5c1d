"""Auth domain service - authentication business logic."""

import asyncio
import logging
from dataclasses import dataclass

from app.core.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    TokenRevokedError,
)
from app.core.security import PasswordHasher
from app.core.tokens import TokenClaims, TokenCodec, TokenPair
from app.domains.auth.repository import TokenRevocationList
from app.domains.auth.schemas import CraftsmanRegisterRequest, RegisterRequest
from app.domains.craftsman.models import CraftsmanProfile
from app.domains.craftsman.repository import CraftsmanRepositoryInterface
from app.domains.user.models import UserRecord, UserRole
from app.domains.user.repository import UserRepositoryInterface

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Tokens issued for a user, with the user's record."""

    tokens: TokenPair
    user: UserRecord
    craftsman: CraftsmanProfile | None = None


class AuthService:
    """Authentication service.

    Holds no state of its own; every store it touches is passed in.
    """

    def __init__(
        self,
        users: UserRepositoryInterface,
        codec: TokenCodec,
        hasher: PasswordHasher,
        revocations: TokenRevocationList,
        craftsmen: CraftsmanRepositoryInterface | None = None,
    ):
        self._users = users
        self._codec = codec
        self._hasher = hasher
        self._revocations = revocations
        self._craftsmen = craftsmen

    def _issue(self, user: UserRecord) -> TokenPair:
        return self._codec.issue_pair(
            subject=user.id,
            role=user.role,
            name=user.name,
            surname=user.surname,
        )

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate user and return tokens.

        Args:
            email: User email
            password: Plain text password

        Returns:
            AuthResult with a fresh token pair

        Raises:
            InvalidCredentialsError: If email or password is wrong
        """
        user = await self._users.find_by_email(email)

        if user is None:
            self._hasher.verify_dummy(password)
            logger.warning("Login failed: unknown email")
            raise InvalidCredentialsError()

        if not self._hasher.verify(password, user.password_hash):
            logger.warning("Login failed: wrong password for user %s", user.id)
            raise InvalidCredentialsError()

        tokens = self._issue(user)
        logger.info("User %s logged in", user.id)
        return AuthResult(tokens=tokens, user=user)

    async def _create_user(
        self,
        *,
        name: str,
        surname: str,
        username: str,
        email: str,
        password: str,
        role: UserRole,
    ) -> UserRecord:
        # Policy violations surface before any store access
        password_hash = self._hasher.hash(password)

        if await self._users.find_by_email(email) is not None:
            raise ConflictError("Email already exists", details={"field": "email"})

        user = UserRecord(
            name=name,
            surname=surname,
            username=username,
            email=email,
            password_hash=password_hash,
            role=role,
        )
        return await self._users.insert(user)

    async def register(self, data: RegisterRequest) -> AuthResult:
        """
        Register a customer account and log it in.

        Raises:
            PasswordPolicyError: If the password violates the policy
            ConflictError: If the email is already registered
        """
        user = await self._create_user(
            name=data.name,
            surname=data.surname,
            username=data.username,
            email=data.email,
            password=data.password,
            role=UserRole.CUSTOMER,
        )
        tokens = self._issue(user)
        logger.info("Registered user %s", user.id)
        return AuthResult(tokens=tokens, user=user)

    async def register_craftsman(self, data: CraftsmanRegisterRequest) -> AuthResult:
        """
        Register a craftsman account together with its profile.

        Both records are created or neither is: if the profile cannot be
        stored, or the request is cancelled midway, the freshly created
        account is deleted again and the original error propagates.
        """
        if self._craftsmen is None:
            raise RuntimeError("Craftsman repository is not configured")

        user = await self._create_user(
            name=data.name,
            surname=data.surname,
            username=data.username,
            email=data.email,
            password=data.password,
            role=UserRole.CRAFTSMAN,
        )

        profile = CraftsmanProfile(
            user_id=user.id,
            bio=data.bio,
            experience=data.experience,
            rating=data.rating,
            location=data.location,
            contact_info=data.contact_info,
        )
        try:
            profile = await self._craftsmen.insert(profile)
            tokens = self._issue(user)
        except BaseException:
            # Cancellation included; the delete must outlive the cancelled request
            logger.exception("Craftsman registration failed, rolling back user %s", user.id)
            await asyncio.shield(self._users.delete(user.id))
            raise

        logger.info("Registered craftsman %s", user.id)
        return AuthResult(tokens=tokens, user=user, craftsman=profile)

    async def refresh(self, refresh_token: str) -> str:
        """
        Exchange a refresh token for a new access token.

        Raises:
            TokenExpiredError: If the refresh token has expired
            InvalidTokenError: If the refresh token is invalid or revoked
        """
        claims = self._codec.validate_refresh(refresh_token)
        if await self._revocations.is_revoked(claims.jti):
            raise TokenRevokedError()
        return self._codec.create_access_token(claims.sub, claims.role)

    async def logout(self, access_claims: TokenClaims, refresh_token: str | None = None) -> None:
        """
        Revoke the current access token and, when given, the refresh token.

        An unusable refresh token is ignored; the session ends either way.
        """
        await self._revocations.revoke(access_claims)

        if refresh_token:
            try:
                refresh_claims = self._codec.validate_refresh(refresh_token)
            except (InvalidTokenError, TokenExpiredError):
                refresh_claims = None
            if refresh_claims is not None and refresh_claims.sub == access_claims.sub:
                await self._revocations.revoke(refresh_claims)

        logger.info("User %s logged out", access_claims.sub)
