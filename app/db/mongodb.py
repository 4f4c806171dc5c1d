"""MongoDB database connection using Motor (async driver)."""

import logging

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import Settings
from app.domains.craftsman.repository import CRAFTSMEN_COLLECTION
from app.domains.user.repository import USERS_COLLECTION

logger = logging.getLogger(__name__)


async def connect_mongodb(settings: Settings) -> AsyncIOMotorClient:
    """Connect to MongoDB and return the client."""
    client = AsyncIOMotorClient(
        settings.mongodb_url,
        maxPoolSize=50,  # Connection pool size
        minPoolSize=10,  # Minimum connections to keep
        maxIdleTimeMS=30000,  # Close idle connections after 30s
        connectTimeoutMS=5000,  # Connection timeout
        serverSelectionTimeoutMS=5000,  # Server selection timeout
    )

    # Test connection
    try:
        await client.admin.command("ping")
        logger.info("Connected to MongoDB: %s", settings.mongodb_database)
    except Exception:
        logger.exception("Failed to connect to MongoDB")
        raise

    return client


async def close_mongodb(client: AsyncIOMotorClient | None) -> None:
    """Close MongoDB connection."""
    if client is not None:
        client.close()
        logger.info("MongoDB connection closed")


def get_mongodb(request: Request) -> AsyncIOMotorDatabase:
    """
    Get the MongoDB database created at startup.

    Usage:
        @app.get("/")
        async def endpoint(db: AsyncIOMotorDatabase = Depends(get_mongodb)):
            collection = db["users"]
            ...
    """
    db = getattr(request.app.state, "mongodb", None)
    if db is None:
        raise RuntimeError("MongoDB is not connected")
    return db


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Create indexes the auth flows rely on.

    The unique email index backs the duplicate-email check on registration.
    """
    await db[USERS_COLLECTION].create_index("email", unique=True)
    await db[CRAFTSMEN_COLLECTION].create_index("user_id", unique=True)

    logger.info("Ensured MongoDB indexes")
