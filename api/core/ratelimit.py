"""Per-client rate limits for the public and admin compilation endpoints.

Limits are slowapi strings from settings (``PUBLIC_RATE_LIMIT``,
``ADMIN_RATE_LIMIT``). Counters live in ``RATELIMIT_STORAGE_URI``; the
``memory://`` default is per process, so deployments with more than one
worker need a shared store such as Redis.
"""

import logging

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 60


def _build_limiter(settings: Settings) -> Limiter:
    shared = settings.ratelimit_storage_uri.startswith(("redis://", "rediss://"))
    if not shared and settings.environment != "development":
        logger.warning(
            "ratelimit.storage.per_process",
            extra={
                "environment": settings.environment,
                "storage_uri": settings.ratelimit_storage_uri,
            },
        )

    return Limiter(
        key_func=get_remote_address,
        storage_uri=settings.ratelimit_storage_uri,
        # Keep limiting per process while the shared store is down
        in_memory_fallback_enabled=shared,
        key_prefix="compilations:",
    )


_settings = get_settings()

limiter = _build_limiter(_settings)

PUBLIC_LIMIT = _settings.public_rate_limit

ADMIN_LIMIT = _settings.admin_rate_limit


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """429 with the breached limit and a Retry-After header."""
    retry_after = getattr(exc, "retry_after", DEFAULT_RETRY_AFTER_SECONDS)
    logger.warning(
        "ratelimit.exceeded",
        extra={
            "client": get_remote_address(request),
            "path": request.url.path,
            "limit": exc.detail,
        },
    )
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
        headers={"Retry-After": str(retry_after)},
    )
