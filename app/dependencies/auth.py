"""Authentication dependencies for FastAPI."""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from redis.asyncio import Redis

from app.core.exceptions import (
    AuthenticationError,
    InsufficientPermissionsError,
    TokenRevokedError,
)
from app.core.security import PasswordHasher
from app.core.tokens import TokenClaims, TokenCodec
from app.db.redis import get_redis
from app.domains.auth.repository import TokenRevocationList
from app.domains.user.models import UserRole

logger = logging.getLogger(__name__)

# JWT Bearer scheme
bearer_scheme = HTTPBearer(auto_error=False)


class CurrentIdentity(BaseModel):
    """Identity attached to an authenticated request."""

    user_id: str
    role: UserRole
    name: str | None = None
    surname: str | None = None
    jti: str
    expires_at: datetime

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "CurrentIdentity":
        return cls(
            user_id=claims.sub,
            role=claims.role,
            name=claims.name,
            surname=claims.surname,
            jti=claims.jti,
            expires_at=claims.expires_at,
        )


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_revocation_list(redis: Redis = Depends(get_redis)) -> TokenRevocationList:
    """Dependency injection for TokenRevocationList."""
    return TokenRevocationList(redis)


async def get_access_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    codec: TokenCodec = Depends(get_token_codec),
    revocations: TokenRevocationList = Depends(get_revocation_list),
) -> TokenClaims:
    """
    Verify the bearer access token and return its claims.

    Raises:
        AuthenticationError: If no bearer token was sent
        TokenExpiredError: If the token has expired
        InvalidTokenError: If the token is invalid
        TokenRevokedError: If the token was revoked by logout
    """
    if not credentials:
        raise AuthenticationError("Authorization header required")

    claims = codec.validate_access(credentials.credentials)

    if await revocations.is_revoked(claims.jti):
        raise TokenRevokedError()

    return claims


async def get_current_user(
    claims: Annotated[TokenClaims, Depends(get_access_claims)],
) -> CurrentIdentity:
    """Return the identity and role carried by the access token."""
    return CurrentIdentity.from_claims(claims)


def require_roles(*allowed_roles: UserRole):
    """
    Dependency factory that checks if current user has required role.

    Usage:
        @router.get("/admin-only")
        async def admin_endpoint(
            user: CurrentIdentity = Depends(require_roles(UserRole.ADMIN))
        ):
            ...
    """
    async def role_checker(
        current_user: CurrentIdentity = Depends(get_current_user),
    ) -> CurrentIdentity:
        if current_user.role not in allowed_roles:
            logger.warning(
                "User %s with role %s denied; requires %s",
                current_user.user_id,
                current_user.role.value,
                [r.value for r in allowed_roles],
            )
            raise InsufficientPermissionsError(
                f"Required roles: {[r.value for r in allowed_roles]}"
            )

        return current_user

    return role_checker


# Type aliases for cleaner dependency injection
AccessClaims = Annotated[TokenClaims, Depends(get_access_claims)]
CurrentUser = Annotated[CurrentIdentity, Depends(get_current_user)]
CraftsmanOnly = Annotated[CurrentIdentity, Depends(require_roles(UserRole.CRAFTSMAN))]
AdminOnly = Annotated[CurrentIdentity, Depends(require_roles(UserRole.ADMIN))]
