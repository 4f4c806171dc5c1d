"""Pytest configuration and shared fixtures."""

from typing import Any, AsyncGenerator

import fakeredis.aioredis
import pytest
import pytest_asyncio
from bson import ObjectId
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.core.security import PasswordHasher
from app.core.tokens import TokenCodec
from app.dependencies.stores import get_craftsman_repository, get_user_repository
from app.domains.auth.repository import TokenRevocationList
from app.domains.auth.service import AuthService
from app.domains.craftsman.models import CraftsmanProfile
from app.domains.craftsman.repository import CraftsmanRepositoryInterface
from app.domains.user.models import UserRecord
from app.domains.user.repository import UserRepositoryInterface
from app.main import create_app

ACCESS_SECRET = "test-access-secret-0123456789abcdef"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"
TEST_BCRYPT_ROUNDS = 4


class InMemoryUserRepository(UserRepositoryInterface):
    """User repository kept in a dict, standing in for MongoDB."""

    def __init__(self):
        self.users: dict[str, UserRecord] = {}

    async def find_by_email(self, email: str) -> UserRecord | None:
        for user in self.users.values():
            if user.email == email:
                return user.model_copy()
        return None

    async def find_by_id(self, user_id: str) -> UserRecord | None:
        user = self.users.get(user_id)
        return user.model_copy() if user else None

    async def insert(self, user: UserRecord) -> UserRecord:
        user.id = str(ObjectId())
        self.users[user.id] = user.model_copy()
        return user

    async def update_fields(self, user_id: str, fields: dict[str, Any]) -> UserRecord | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        self.users[user_id] = user.model_copy(update=fields)
        return self.users[user_id].model_copy()

    async def delete(self, user_id: str) -> bool:
        return self.users.pop(user_id, None) is not None


class InMemoryCraftsmanRepository(CraftsmanRepositoryInterface):
    """Craftsman profile repository kept in a dict; can be told to fail inserts."""

    def __init__(self):
        self.profiles: dict[str, CraftsmanProfile] = {}
        self.fail_inserts = False

    async def insert(self, profile: CraftsmanProfile) -> CraftsmanProfile:
        if self.fail_inserts:
            raise RuntimeError("craftsman_profiles unavailable")
        profile.id = str(ObjectId())
        self.profiles[profile.user_id] = profile.model_copy()
        return profile

    async def find_by_user_id(self, user_id: str) -> CraftsmanProfile | None:
        profile = self.profiles.get(user_id)
        return profile.model_copy() if profile else None


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests: fast bcrypt, no rate limit, tokens exposed."""
    return Settings(
        _env_file=None,
        environment="test",
        jwt_access_secret=ACCESS_SECRET,
        jwt_refresh_secret=REFRESH_SECRET,
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
        rate_limit_enabled=False,
        expose_verification_token=True,
    )


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_BCRYPT_ROUNDS)


@pytest_asyncio.fixture
async def redis_client() -> AsyncGenerator[fakeredis.aioredis.FakeRedis, None]:
    """In-memory Redis emulation."""
    client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def craftsman_repository() -> InMemoryCraftsmanRepository:
    return InMemoryCraftsmanRepository()


@pytest.fixture
def auth_service(
    user_repository, craftsman_repository, codec, hasher, redis_client
) -> AuthService:
    return AuthService(
        users=user_repository,
        codec=codec,
        hasher=hasher,
        revocations=TokenRevocationList(redis_client),
        craftsmen=craftsman_repository,
    )


@pytest.fixture
def app(test_settings, redis_client, user_repository, craftsman_repository) -> FastAPI:
    """Application wired to fakes; the lifespan (real connections) is not run."""
    application = create_app(test_settings)
    application.state.redis = redis_client
    application.dependency_overrides[get_user_repository] = lambda: user_repository
    application.dependency_overrides[get_craftsman_repository] = lambda: craftsman_repository
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def sample_user_data() -> dict:
    """Sample registration payload."""
    return {
        "name": "Ana",
        "surname": "Novak",
        "username": "ana",
        "email": "ana@example.com",
        "password": "Str0ng!Pass",
    }


@pytest.fixture
def sample_craftsman_data() -> dict:
    """Sample craftsman registration payload."""
    return {
        "name": "Marko",
        "surname": "Kovač",
        "username": "marko",
        "email": "marko@example.com",
        "password": "W00d&Work",
        "bio": "Woodturner",
        "experience": 12,
        "rating": 4.5,
        "location": "Ljubljana",
        "contact_info": {"phone": "+38640111222", "website": "", "social_media": {}},
    }
