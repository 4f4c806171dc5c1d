"""Email verification schemas - request/response models."""

from pydantic import BaseModel

from app.domains.user.models import UserPublic


class VerificationSentResponse(BaseModel):
    """Response after a verification token was issued.

    ``token`` is only filled in when the server exposes tokens (development).
    """

    message: str = "Verification email sent"
    token: str | None = None


class EmailVerifiedResponse(BaseModel):
    message: str = "Email verified successfully"
    user: UserPublic
