"""Auth API router - login, registration, token refresh, logout."""

from fastapi import APIRouter, Depends, Request, status

from app.core.security import PasswordHasher
from app.core.tokens import TokenCodec
from app.dependencies.auth import (
    AccessClaims,
    get_password_hasher,
    get_revocation_list,
    get_token_codec,
)
from app.dependencies.stores import get_craftsman_repository, get_user_repository
from app.domains.auth.repository import TokenRevocationList
from app.domains.auth.schemas import (
    AuthResponse,
    CraftsmanAuthResponse,
    CraftsmanRegisterRequest,
    LoginRequest,
    LogoutRequest,
    MessageResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
)
from app.domains.auth.service import AuthResult, AuthService
from app.domains.craftsman.repository import CraftsmanRepositoryInterface
from app.domains.user.repository import UserRepositoryInterface

router = APIRouter()


def get_auth_service(
    users: UserRepositoryInterface = Depends(get_user_repository),
    craftsmen: CraftsmanRepositoryInterface = Depends(get_craftsman_repository),
    codec: TokenCodec = Depends(get_token_codec),
    hasher: PasswordHasher = Depends(get_password_hasher),
    revocations: TokenRevocationList = Depends(get_revocation_list),
) -> AuthService:
    """Dependency injection for AuthService."""
    return AuthService(
        users=users,
        codec=codec,
        hasher=hasher,
        revocations=revocations,
        craftsmen=craftsmen,
    )


def _expires_in(request: Request) -> int:
    return int(request.app.state.token_codec.access_ttl.total_seconds())


def _auth_response(request: Request, result: AuthResult) -> AuthResponse:
    return AuthResponse(
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
        expires_in=_expires_in(request),
        user=result.user.to_public(),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
):
    """
    Login with email and password.

    Returns access token and refresh token.
    """
    result = await service.login(email=body.email, password=body.password)
    return _auth_response(request, result)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
):
    """Register a customer account and return its first token pair."""
    result = await service.register(body)
    return _auth_response(request, result)


@router.post(
    "/register/craftsman",
    response_model=CraftsmanAuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_craftsman(
    body: CraftsmanRegisterRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
):
    """Register a craftsman account and profile in one step."""
    result = await service.register_craftsman(body)
    base = _auth_response(request, result)
    return CraftsmanAuthResponse(**base.model_dump(), craftsman=result.craftsman)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    body: RefreshRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
):
    """
    Refresh access token using refresh token.

    Expired and invalid refresh tokens answer 401 with a distinct reason.
    """
    access_token = await service.refresh(body.refresh_token)

    return RefreshResponse(
        access_token=access_token,
        expires_in=_expires_in(request),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    claims: AccessClaims,
    body: LogoutRequest | None = None,
    service: AuthService = Depends(get_auth_service),
):
    """
    Logout current session.

    Revokes the current access token, and the refresh token when sent.
    """
    await service.logout(claims, refresh_token=body.refresh_token if body else None)
    return MessageResponse(message="Logged out successfully")
