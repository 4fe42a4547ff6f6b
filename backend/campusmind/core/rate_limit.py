"""
Rate limiting for the public search API (slowapi).

Search and recommendation routes fan out to several upstream providers
per call, so they carry their own per-client limits on top of the
global default. Counters live in Redis when it answers at startup and
in process memory otherwise. With RATE_LIMIT_ENABLED=false the limiter
is built disabled and Redis is never contacted.
"""
import redis
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from campusmind.core.config import settings
from campusmind.core.logging import get_logger

logger = get_logger(__name__)

MEMORY_STORAGE = "memory://"
DEFAULT_RETRY_AFTER = 60

SEARCH_LIMIT = settings.search_rate_limit
RECOMMENDATION_LIMIT = settings.recommendation_rate_limit
IMPORT_LIMIT = settings.import_rate_limit


def client_key(request: Request) -> str:
    """Client behind a proxy: first X-Forwarded-For hop, else the peer address."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",")[0].strip()
    return first_hop or get_remote_address(request)


def resolve_storage_uri() -> str:
    if not settings.RATE_LIMIT_ENABLED:
        return MEMORY_STORAGE

    redis_uri = f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}"
    try:
        redis.from_url(redis_uri, socket_connect_timeout=2).ping()
    except (redis.ConnectionError, redis.TimeoutError) as e:
        logger.warning(f"Redis unavailable for rate limiting ({e}), counting in memory")
        return MEMORY_STORAGE

    logger.info(f"Rate limiter using Redis at {settings.REDIS_HOST}:{settings.REDIS_PORT}")
    return redis_uri


storage_uri = resolve_storage_uri()

limiter = Limiter(
    key_func=client_key,
    storage_uri=storage_uri,
    default_limits=[settings.default_rate_limit],
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    retry_after = getattr(exc, "retry_after", DEFAULT_RETRY_AFTER)
    limit = getattr(request.state, "view_rate_limit", None)
    logger.warning(f"Rate limit hit by {client_key(request)} on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=429,
        content={
            "error": "Rate limit exceeded",
            "detail": f"Too many requests. {exc.detail}",
            "retry_after": retry_after,
        },
        headers={
            "Retry-After": str(retry_after),
            "X-RateLimit-Limit": str(limit) if limit is not None else "unknown",
        },
    )
