"""Craftsman profile repository - data access layer for MongoDB."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.domains.craftsman.models import CraftsmanProfile

CRAFTSMEN_COLLECTION = "craftsman_profiles"


class CraftsmanRepositoryInterface(ABC):
    """Craftsman profile repository interface (Port)."""

    @abstractmethod
    async def insert(self, profile: CraftsmanProfile) -> CraftsmanProfile:
        """Create a craftsman profile."""
        pass

    @abstractmethod
    async def find_by_user_id(self, user_id: str) -> CraftsmanProfile | None:
        """Get the profile belonging to a user."""
        pass


class MongoCraftsmanRepository(CraftsmanRepositoryInterface):
    """MongoDB implementation of craftsman profile repository (Adapter)."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db
        self._collection = db[CRAFTSMEN_COLLECTION]

    async def insert(self, profile: CraftsmanProfile) -> CraftsmanProfile:
        """Create a craftsman profile."""
        profile_dict = profile.model_dump(exclude={"id"})
        profile_dict["user_id"] = ObjectId(profile.user_id)
        profile_dict["created_at"] = datetime.now(timezone.utc)
        profile_dict["updated_at"] = datetime.now(timezone.utc)

        result = await self._collection.insert_one(profile_dict)
        profile.id = str(result.inserted_id)
        return profile

    async def find_by_user_id(self, user_id: str) -> CraftsmanProfile | None:
        """Get the profile belonging to a user."""
        doc = await self._collection.find_one({"user_id": ObjectId(user_id)})
        if not doc:
            return None

        doc["_id"] = str(doc["_id"])
        doc["user_id"] = str(doc["user_id"])
        return CraftsmanProfile(**doc)
