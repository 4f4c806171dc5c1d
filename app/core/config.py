"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_prefix: str = "/api"
    # Proxies whose X-Forwarded-For is trusted (client address for rate limiting)
    forwarded_allow_ips: str = "127.0.0.1"

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "craft_market"

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # JWT Settings (no defaults: startup fails without them)
    jwt_access_secret: str
    jwt_refresh_secret: str
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 15
    jwt_refresh_token_expire_days: int = 7

    # Passwords
    bcrypt_rounds: int = 12

    # Email verification
    verification_token_ttl_hours: int = 24
    expose_verification_token: bool = False

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8080"]

    # Rate Limiting
    rate_limit_enabled: bool = True
    rate_limit_requests: int = 20
    rate_limit_window_seconds: int = 60

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            import json

            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("jwt_access_secret", "jwt_refresh_secret")
    @classmethod
    def secret_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT secrets must not be empty")
        return v

    @field_validator("jwt_algorithm")
    @classmethod
    def hmac_algorithm_only(cls, v: str) -> str:
        if v not in ("HS256", "HS384", "HS512"):
            raise ValueError("Only HMAC algorithms (HS256/HS384/HS512) are supported")
        return v

    @model_validator(mode="after")
    def secrets_are_distinct(self) -> "Settings":
        if self.jwt_access_secret == self.jwt_refresh_secret:
            raise ValueError("Access and refresh secrets must differ")
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
