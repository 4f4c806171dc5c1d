"""Database module - MongoDB and Redis connections."""

from app.db.mongodb import get_mongodb
from app.db.redis import get_redis

__all__ = [
    "get_mongodb",
    "get_redis",
]
