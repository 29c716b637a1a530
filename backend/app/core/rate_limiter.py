"""
Rate Limiting for the Campus Activity Board API
===============================================
Implements rate limiting using slowapi.

Only the credential endpoints are limited, keyed by client address:
- /auth/login: LOGIN_RATE_LIMIT (brute force protection)
- /auth/signup: SIGNUP_RATE_LIMIT

Storage defaults to in-process memory; point RATE_LIMIT_STORAGE_URI at
Redis when running more than one worker.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    """Rate limit key: the client IP address"""
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """JSON 429 with a Retry-After hint"""
    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "detail": "Too many requests. Please slow down.",
            "error": {
                "code": "RATE_LIMITED",
                "message": "Too many requests. Please slow down.",
                "details": {"limit": str(exc.detail)},
            },
        },
        headers={"Retry-After": "60"},
    )


def login_rate_limit():
    return limiter.limit(settings.LOGIN_RATE_LIMIT)


def signup_rate_limit():
    return limiter.limit(settings.SIGNUP_RATE_LIMIT)
