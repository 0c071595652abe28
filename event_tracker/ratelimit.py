"""Per-client rate limiting.

Excess requests are rejected with 429 by ``SlowAPIMiddleware`` before
they reach any handler.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
import structlog

from .config import Settings
from .middleware import get_correlation_id

log = structlog.get_logger()


def build_limiter(settings: Settings) -> Limiter:
    """
    IP-keyed limiter with one ``settings.RATE_LIMIT`` budget per client.

    Application limits share one counter across all routes.
    Routes marked with ``limiter.exempt`` are not counted.
    """
    return Limiter(
        key_func=get_remote_address,
        application_limits=[settings.RATE_LIMIT],
        enabled=settings.RATE_LIMIT_ENABLED,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # must stay sync: SlowAPIMiddleware calls it without awaiting
    log.warning("rate_limit.exceeded", limit=str(exc.detail), client=get_remote_address(request))
    return JSONResponse(
        status_code=429,
        content={
            "error": "TooManyRequests",
            "message": f"Rate limit exceeded: {exc.detail}",
            "correlation_id": get_correlation_id(),
        },
    )


def install_rate_limiting(app: FastAPI, settings: Settings) -> Limiter:
    """Attach a limiter to ``app`` (SlowAPI expects it on app.state)."""
    limiter = build_limiter(settings)
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    return limiter
