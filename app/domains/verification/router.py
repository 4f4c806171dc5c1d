"""Email verification API router."""

from datetime import timedelta

from fastapi import APIRouter, Depends, Query, Request
from redis.asyncio import Redis

from app.db.redis import get_redis
from app.dependencies.auth import CurrentUser
from app.dependencies.stores import get_user_repository
from app.domains.user.repository import UserRepositoryInterface
from app.domains.verification.repository import EmailVerificationStore
from app.domains.verification.schemas import EmailVerifiedResponse, VerificationSentResponse
from app.domains.verification.service import EmailVerificationService

router = APIRouter()


def get_verification_service(
    request: Request,
    users: UserRepositoryInterface = Depends(get_user_repository),
    redis: Redis = Depends(get_redis),
) -> EmailVerificationService:
    """Dependency injection for EmailVerificationService."""
    settings = request.app.state.settings
    store = EmailVerificationStore(
        redis,
        ttl=timedelta(hours=settings.verification_token_ttl_hours),
    )
    return EmailVerificationService(users=users, store=store)


@router.post("/verify/send", response_model=VerificationSentResponse)
async def send_verification_email(
    current_user: CurrentUser,
    request: Request,
    service: EmailVerificationService = Depends(get_verification_service),
):
    """Issue a verification token for the authenticated user's email."""
    token = await service.send(current_user.user_id)

    if request.app.state.settings.expose_verification_token:
        return VerificationSentResponse(token=token)
    return VerificationSentResponse()


@router.get("/verify", response_model=EmailVerifiedResponse)
async def verify_email(
    token: str = Query(..., min_length=1, max_length=128),
    service: EmailVerificationService = Depends(get_verification_service),
):
    """Confirm an email address with a verification token."""
    user = await service.verify(token)
    return EmailVerifiedResponse(user=user)
