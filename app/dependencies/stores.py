"""Repository dependencies for FastAPI."""

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.db.mongodb import get_mongodb
from app.domains.craftsman.repository import (
    CraftsmanRepositoryInterface,
    MongoCraftsmanRepository,
)
from app.domains.user.repository import MongoUserRepository, UserRepositoryInterface


def get_user_repository(
    db: AsyncIOMotorDatabase = Depends(get_mongodb),
) -> UserRepositoryInterface:
    """Dependency injection for the user repository."""
    return MongoUserRepository(db)


def get_craftsman_repository(
    db: AsyncIOMotorDatabase = Depends(get_mongodb),
) -> CraftsmanRepositoryInterface:
    """Dependency injection for the craftsman profile repository."""
    return MongoCraftsmanRepository(db)
