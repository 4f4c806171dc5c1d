"""Auth domain schemas - request/response models."""

from pydantic import BaseModel, EmailStr, Field

from app.domains.craftsman.models import ContactInformation, CraftsmanProfile
from app.domains.user.models import UserPublic


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class RegisterRequest(BaseModel):
    """Registration request schema.

    Password strength is checked by the password policy, not here, so that
    callers get the specific violation.
    """

    name: str = Field(..., min_length=1, max_length=100)
    surname: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., max_length=128)


class CraftsmanRegisterRequest(BaseModel):
    """Combined account + craftsman profile registration."""

    name: str = Field("", max_length=100)
    surname: str = Field("", max_length=100)
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., max_length=128)
    bio: str = ""
    experience: int = Field(0, ge=0)
    rating: float = Field(0.0, ge=0, le=5)
    location: str = Field(..., min_length=1)
    contact_info: ContactInformation = Field(default_factory=ContactInformation)


class AuthResponse(BaseModel):
    """Login/registration response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration in seconds")
    user: UserPublic


class CraftsmanAuthResponse(AuthResponse):
    """Craftsman registration response schema."""

    craftsman: CraftsmanProfile


class RefreshRequest(BaseModel):
    """Token refresh request schema."""

    refresh_token: str


class RefreshResponse(BaseModel):
    """Token refresh response schema."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class LogoutRequest(BaseModel):
    """Logout request schema; the refresh token is revoked too when given."""

    refresh_token: str | None = None


class MessageResponse(BaseModel):
    message: str
