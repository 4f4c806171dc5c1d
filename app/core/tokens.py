"""JWT codec for access and refresh tokens.

Access and refresh tokens are told apart only by their signing secret:
there is no "type" claim, so a token presented with the wrong secret fails
signature verification and is rejected as invalid.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel, ValidationError

from app.core.config import Settings
from app.core.exceptions import InvalidTokenError, TokenExpiredError, TokenSigningError
from app.domains.user.models import UserRole

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(minutes=15)
REFRESH_TOKEN_TTL = timedelta(days=7)

REQUIRED_CLAIMS = ["sub", "role", "iat", "nbf", "exp", "jti"]


class TokenPair(BaseModel):
    """Access and refresh token issued together."""

    access_token: str
    refresh_token: str


class TokenClaims(BaseModel):
    """Decoded claim set of a validated token."""

    sub: str
    role: UserRole
    name: str | None = None
    surname: str | None = None
    iat: int
    nbf: int
    exp: int
    jti: str

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)

    def remaining_seconds(self, now: datetime | None = None) -> int:
        """Seconds until expiry, never negative."""
        now = now or datetime.now(timezone.utc)
        return max(0, self.exp - int(now.timestamp()))


def _utcnow() -> datetime:
    # JWT NumericDate has second resolution
    return datetime.now(timezone.utc).replace(microsecond=0)


class TokenCodec:
    """Issues and validates HMAC-signed JWTs."""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = ACCESS_TOKEN_TTL,
        refresh_ttl: timedelta = REFRESH_TOKEN_TTL,
    ):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(
            access_secret=settings.jwt_access_secret,
            refresh_secret=settings.jwt_refresh_secret,
            algorithm=settings.jwt_algorithm,
            access_ttl=timedelta(minutes=settings.jwt_access_token_expire_minutes),
            refresh_ttl=timedelta(days=settings.jwt_refresh_token_expire_days),
        )

    def _sign(self, claims: dict, secret: str, ttl: timedelta) -> str:
        now = _utcnow()
        to_encode = {
            **claims,
            "iat": now,
            "nbf": now,
            "exp": now + ttl,
            "jti": str(uuid.uuid4()),
        }
        try:
            return jwt.encode(to_encode, secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            logger.error("Token signing failed: %s", type(e).__name__)
            raise TokenSigningError() from e

    def create_access_token(
        self,
        subject: str,
        role: UserRole,
        name: str | None = None,
        surname: str | None = None,
    ) -> str:
        """Create a short-lived access token carrying role and display attributes."""
        claims: dict = {"sub": subject, "role": UserRole(role).value}
        if name:
            claims["name"] = name
        if surname:
            claims["surname"] = surname
        return self._sign(claims, self.access_secret, self.access_ttl)

    def create_refresh_token(self, subject: str, role: UserRole) -> str:
        """Create a long-lived refresh token carrying only subject and role."""
        claims = {"sub": subject, "role": UserRole(role).value}
        return self._sign(claims, self.refresh_secret, self.refresh_ttl)

    def issue_pair(
        self,
        subject: str,
        role: UserRole,
        name: str | None = None,
        surname: str | None = None,
    ) -> TokenPair:
        """
        Issue an access/refresh token pair.

        Both tokens are signed before anything is returned, so a signing
        failure never yields half a pair.

        Raises:
            TokenSigningError: If either token cannot be signed
        """
        access_token = self.create_access_token(subject, role, name, surname)
        refresh_token = self.create_refresh_token(subject, role)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def validate(self, token: str, secret: str) -> TokenClaims:
        """
        Decode and verify a token against the given secret.

        Args:
            token: JWT token string
            secret: Secret the token is expected to be signed with

        Returns:
            Decoded claims

        Raises:
            TokenExpiredError: If the current instant is past the token's expiry
            InvalidTokenError: If the token is malformed, signed with another
                secret or algorithm, not yet valid, or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS, "verify_exp": False},
            )
            claims = TokenClaims.model_validate(payload)
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError() from e
        except ValidationError as e:
            raise InvalidTokenError("Invalid token claims") from e

        # Valid up to and including the expiry second
        if datetime.now(timezone.utc).timestamp() > claims.exp:
            raise TokenExpiredError()

        if claims.exp <= claims.iat:
            raise InvalidTokenError("Invalid token claims")

        return claims

    def validate_access(self, token: str) -> TokenClaims:
        return self.validate(token, self.access_secret)

    def validate_refresh(self, token: str) -> TokenClaims:
        return self.validate(token, self.refresh_secret)

    def refresh_access(self, refresh_token: str) -> str:
        """
        Mint a new access token from a refresh token.

        Only subject and role carry over; display attributes are dropped.
        Validation errors of the refresh token propagate unchanged.
        """
        claims = self.validate_refresh(refresh_token)
        return self.create_access_token(claims.sub, claims.role)
