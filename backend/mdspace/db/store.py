"""Store and rate limiter factories used as FastAPI dependencies."""

import logging
from datetime import timedelta
from functools import lru_cache

import redis

from backend.mdspace.config import get_settings
from backend.mdspace.db.inmemory import InMemoryMarkdownStore, InMemoryRateLimiter
from backend.mdspace.db.redis_store import RedisMarkdownStore
from backend.mdspace.db.repositories import MarkdownStore, RateLimiter
from backend.mdspace.ratelimit import RedisRateLimiter

logger = logging.getLogger(__name__)


@lru_cache
def get_store() -> MarkdownStore:
    """Get the process-wide markdown store.

    Uses Redis when REDIS_URL is configured, otherwise an in-memory store.
    """
    settings = get_settings()
    ttl = timedelta(hours=settings.markdown_ttl_hours)

    if settings.redis_url:
        logger.info("Using Redis markdown store")
        return RedisMarkdownStore.from_url(
            settings.redis_url,
            ttl=ttl,
            max_files_per_user=settings.max_files_per_user,
        )

    logger.warning("No REDIS_URL configured, using in-memory markdown store")
    return InMemoryMarkdownStore(ttl=ttl, max_files_per_user=settings.max_files_per_user)


@lru_cache
def get_rate_limiter() -> RateLimiter:
    """Get the process-wide write rate limiter."""
    settings = get_settings()

    if settings.redis_url:
        client = redis.from_url(settings.redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
        return RedisRateLimiter(client, max_requests=settings.writes_per_min)

    return InMemoryRateLimiter(max_requests=settings.writes_per_min)
