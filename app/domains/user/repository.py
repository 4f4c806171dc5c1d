"""User repository - data access layer for MongoDB."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import ConflictError
from app.domains.user.models import UserRecord

USERS_COLLECTION = "users"


class UserRepositoryInterface(ABC):
    """User repository interface (Port)."""

    @abstractmethod
    async def find_by_email(self, email: str) -> UserRecord | None:
        """Get user by email."""
        pass

    @abstractmethod
    async def find_by_id(self, user_id: str) -> UserRecord | None:
        """Get user by ID."""
        pass

    @abstractmethod
    async def insert(self, user: UserRecord) -> UserRecord:
        """Create a new user and return it with its ID set."""
        pass

    @abstractmethod
    async def update_fields(self, user_id: str, fields: dict[str, Any]) -> UserRecord | None:
        """Set the given fields and return the updated user."""
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        """Hard delete a user."""
        pass


def _object_id(user_id: str) -> ObjectId | None:
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        return None


def _to_record(doc: dict) -> UserRecord:
    doc["_id"] = str(doc["_id"])
    return UserRecord(**doc)


class MongoUserRepository(UserRepositoryInterface):
    """MongoDB implementation of user repository (Adapter)."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db
        self._collection = db[USERS_COLLECTION]

    async def find_by_email(self, email: str) -> UserRecord | None:
        """Get user by email."""
        doc = await self._collection.find_one({"email": email})
        if not doc:
            return None
        return _to_record(doc)

    async def find_by_id(self, user_id: str) -> UserRecord | None:
        """Get user by ID."""
        oid = _object_id(user_id)
        if oid is None:
            return None

        doc = await self._collection.find_one({"_id": oid})
        if not doc:
            return None
        return _to_record(doc)

    async def insert(self, user: UserRecord) -> UserRecord:
        """Create a new user."""
        user_dict = user.model_dump(exclude={"id"}, mode="python")
        user_dict["role"] = user.role.value
        user_dict["created_at"] = datetime.now(timezone.utc)
        user_dict["updated_at"] = datetime.now(timezone.utc)

        try:
            result = await self._collection.insert_one(user_dict)
        except DuplicateKeyError as e:
            raise ConflictError("Email already exists", details={"field": "email"}) from e

        user.id = str(result.inserted_id)
        return user

    async def update_fields(self, user_id: str, fields: dict[str, Any]) -> UserRecord | None:
        """Set the given fields and return the updated user."""
        oid = _object_id(user_id)
        if oid is None:
            return None

        update = {**fields, "updated_at": datetime.now(timezone.utc)}
        result = await self._collection.update_one({"_id": oid}, {"$set": update})
        if result.matched_count == 0:
            return None
        return await self.find_by_id(user_id)

    async def delete(self, user_id: str) -> bool:
        """Hard delete a user."""
        oid = _object_id(user_id)
        if oid is None:
            return False

        result = await self._collection.delete_one({"_id": oid})
        return result.deleted_count > 0
