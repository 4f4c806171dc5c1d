"""User domain models for MongoDB.

UserRecord carries the password hash and never leaves the service layer;
HTTP responses use the UserPublic projection.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """User role enum."""

    ADMIN = "admin"
    CRAFTSMAN = "craftsman"
    CUSTOMER = "customer"


class UserPublic(BaseModel):
    """User as exposed to API callers (no credential fields)."""

    id: str
    name: str = ""
    surname: str = ""
    username: str
    email: str
    role: UserRole
    email_verified: bool = False
    verified_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class UserRecord(BaseModel):
    """User document model for MongoDB, including the credential hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(None, validation_alias=AliasChoices("_id", "id"))
    name: str = ""
    surname: str = ""
    username: str
    email: str
    password_hash: str
    role: UserRole = UserRole.CUSTOMER

    # Email verification
    email_verified: bool = False
    verified_at: datetime | None = None

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_public(self) -> UserPublic:
        """Project the record onto its public, hash-free shape."""
        return UserPublic.model_validate(
            self.model_dump(exclude={"password_hash"})
        )
