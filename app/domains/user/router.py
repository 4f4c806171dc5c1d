"""User API router - account lookups."""

from fastapi import APIRouter, Depends

from app.core.exceptions import NotFoundError
from app.dependencies.auth import AdminOnly, CurrentUser
from app.dependencies.stores import get_user_repository
from app.domains.user.models import UserPublic
from app.domains.user.repository import UserRepositoryInterface

router = APIRouter()


@router.get("/me", response_model=UserPublic)
async def get_me(
    current_user: CurrentUser,
    users: UserRepositoryInterface = Depends(get_user_repository),
):
    """Get the authenticated user's account."""
    user = await users.find_by_id(current_user.user_id)
    if user is None:
        raise NotFoundError("User", current_user.user_id)
    return user.to_public()


@router.get("/{user_id}", response_model=UserPublic)
async def get_user(
    user_id: str,
    admin: AdminOnly,
    users: UserRepositoryInterface = Depends(get_user_repository),
):
    """Get any user's account (admins only)."""
    user = await users.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user.to_public()
