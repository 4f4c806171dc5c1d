"""ASGI entrypoint.

Run with: uvicorn app.asgi:app, or the ``craft-market-api`` script.
"""

import uvicorn

from app.core.config import get_settings
from app.main import create_app

app = create_app()


def run() -> None:
    """Serve the app on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "app.asgi:app",
        host=settings.api_host,
        port=settings.api_port,
        proxy_headers=True,
        forwarded_allow_ips=settings.forwarded_allow_ips,
        log_level=settings.log_level.lower(),
    )
