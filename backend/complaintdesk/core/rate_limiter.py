"""
Rate Limiting for ComplaintDesk API
===================================
Implements rate limiting using slowapi.

Credential endpoints are limited per client IP to slow down password
guessing:
- /auth/login: 5 req/min
- /auth/register: 3 req/min

Storage defaults to in-process memory; point RATE_LIMIT_STORAGE_URI at
redis:// when running more than one worker.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from complaintdesk.core.config import settings
from complaintdesk.core.logging_config import logger


LOGIN_RATE_LIMIT = "5/minute"
REGISTER_RATE_LIMIT = "3/minute"


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Return the standard error body with a Retry-After hint"""
    logger.warning(
        f"[RateLimit] Exceeded for {get_remote_address(request)} on {request.url.path}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={"error": "Too many requests. Please slow down."},
        headers={"Retry-After": "60"},
    )
