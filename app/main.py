"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import Settings, get_settings
from app.core.exceptions import AppException
from app.core.logging import configure_logging
from app.core.security import PasswordHasher
from app.core.tokens import TokenCodec
from app.db.mongodb import close_mongodb, connect_mongodb, ensure_indexes
from app.db.redis import close_redis, connect_redis
from app.domains.auth.router import router as auth_router
from app.domains.craftsman.router import router as craftsman_router
from app.domains.user.router import router as user_router
from app.domains.verification.router import router as verification_router
from app.middlewares.rate_limit import RateLimitMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan events."""
    settings: Settings = app.state.settings

    # Startup
    logger.info("Starting Craft Market API in %s mode...", settings.environment)

    mongodb_client = await connect_mongodb(settings)
    app.state.mongodb_client = mongodb_client
    app.state.mongodb = mongodb_client[settings.mongodb_database]
    await ensure_indexes(app.state.mongodb)

    app.state.redis = await connect_redis(settings)

    yield

    # Shutdown
    logger.info("Shutting down Craft Market API...")
    await close_mongodb(app.state.mongodb_client)
    await close_redis(app.state.redis)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Missing JWT secrets make ``get_settings()`` raise here, so the process
    never starts without them.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Craft Market API",
        description="Marketplace and booking backend for craftsmen and workshops",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # Read-only after startup
    app.state.settings = settings
    app.state.token_codec = TokenCodec.from_settings(settings)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    if settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            max_requests=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
            path_prefixes=(f"{settings.api_prefix}/auth",),
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
        expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining"],
    )

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        if exc.status_code >= 500:
            logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": exc.error_code,
                    "message": exc.message,
                    "details": exc.details,
                }
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        if settings.is_development:
            return JSONResponse(
                status_code=500,
                content={
                    "error": {
                        "code": "INTERNAL_ERROR",
                        "message": str(exc),
                        "details": {"type": type(exc).__name__},
                    }
                },
            )
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                }
            },
        )

    # Health check endpoints
    @app.get("/health")
    async def health_check():
        return {
            "status": "ok",
            "environment": settings.environment,
            "time": int(datetime.now(timezone.utc).timestamp()),
        }

    @app.get("/health/db")
    async def health_db(request: Request):
        try:
            await request.app.state.mongodb_client.admin.command("ping")
        except Exception as e:
            logger.warning("Database health check failed: %s", e)
            return JSONResponse(
                status_code=500,
                content={"status": "error", "database": "unreachable"},
            )
        return {"status": "ok", "database": "connected"}

    # API info endpoint
    @app.get("/")
    async def root():
        return {
            "name": "Craft Market API",
            "version": "0.1.0",
            "docs": "/docs" if settings.is_development else None,
        }

    # Register routers
    _register_routers(app, settings)

    return app


def _register_routers(app: FastAPI, settings: Settings) -> None:
    """Register all API routers."""
    api_prefix = settings.api_prefix

    app.include_router(auth_router, prefix=f"{api_prefix}/auth", tags=["Auth"])
    app.include_router(
        verification_router, prefix=f"{api_prefix}/users", tags=["Email Verification"]
    )
    app.include_router(user_router, prefix=f"{api_prefix}/users", tags=["Users"])
    app.include_router(
        craftsman_router, prefix=f"{api_prefix}/craftsmen", tags=["Craftsmen"]
    )
