"""Rate limiting middleware for the auth endpoints."""

import logging
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.core.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed-window rate limiting using Redis.

    Limits requests per client address within a time window on paths that
    start with one of ``path_prefixes``. The address is the ASGI peer;
    forwarded headers are only honoured through uvicorn's proxy-headers
    handling for trusted proxies. If Redis is unavailable the request is
    allowed through.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_requests: int,
        window_seconds: int,
        path_prefixes: tuple[str, ...] = (),
    ):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.path_prefixes = path_prefixes

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not request.url.path.startswith(self.path_prefixes):
            return await call_next(request)

        redis = getattr(request.app.state, "redis", None)
        if redis is None:
            return await call_next(request)

        client_host = request.client.host if request.client else "unknown"
        key = f"rate_limit:{client_host}:{request.url.path}"

        try:
            count = await redis.incr(key)
            if count == 1:
                # Window starts with the first request and is never extended
                await redis.expire(key, self.window_seconds)
        except RedisError:
            logger.warning("Rate limiter unavailable, allowing request", exc_info=True)
            return await call_next(request)

        if count > self.max_requests:
            logger.warning("Rate limit exceeded for %s on %s", client_host, request.url.path)
            error = RateLimitExceededError(retry_after=self.window_seconds)
            return JSONResponse(
                status_code=error.status_code,
                content={
                    "error": {
                        "code": error.error_code,
                        "message": error.message,
                        "details": error.details,
                    }
                },
                headers={
                    "Retry-After": str(self.window_seconds),
                    "X-RateLimit-Limit": str(self.max_requests),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(self.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(self.max_requests - count)

        return response
