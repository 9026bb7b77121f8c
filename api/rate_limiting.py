"""Rate limiting for the public auth routes, using slowapi.

Fixed-window counters keyed on client address. Storage is in-memory by
default; production points ``storage_uri`` at Valkey (Redis protocol) so
counters are shared across instances.

Usage in routers:
    @router.post("/login")
    @limiter.limit(rate_limit)
    def login(request: Request, ...):
        ...
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 60


def create_limiter(storage_uri: str = "memory://", enabled: bool = True) -> Limiter:
    """Build the limiter shared by every rate-limited route."""
    return Limiter(
        key_func=get_remote_address,
        storage_uri=storage_uri,
        strategy="fixed-window",
        enabled=enabled,
    )


def _retry_after_seconds(exc: RateLimitExceeded) -> int:
    """Window length of the limit that was hit."""
    try:
        return int(exc.limit.limit.get_expiry())
    except (AttributeError, TypeError, ValueError):
        return DEFAULT_RETRY_AFTER_SECONDS


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 with Retry-After and the standard error envelope."""
    retry_after = _retry_after_seconds(exc)
    logger.warning(f"Rate limit exceeded for {get_remote_address(request)} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content=error_response(
            ErrorCodes.RATE_LIMITED,
            f"Too many requests. Please wait {retry_after} seconds.",
        ),
        headers={"Retry-After": str(retry_after)},
    )
