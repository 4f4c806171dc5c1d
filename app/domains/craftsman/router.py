"""Craftsman API router."""

from fastapi import APIRouter, Depends

from app.core.exceptions import NotFoundError
from app.dependencies.auth import CraftsmanOnly
from app.dependencies.stores import get_craftsman_repository
from app.domains.craftsman.models import CraftsmanProfile
from app.domains.craftsman.repository import CraftsmanRepositoryInterface

router = APIRouter()


@router.get("/me", response_model=CraftsmanProfile)
async def get_my_profile(
    current_user: CraftsmanOnly,
    craftsmen: CraftsmanRepositoryInterface = Depends(get_craftsman_repository),
):
    """Get the authenticated craftsman's profile."""
    profile = await craftsmen.find_by_user_id(current_user.user_id)
    if profile is None:
        raise NotFoundError("Craftsman profile")
    return profile
