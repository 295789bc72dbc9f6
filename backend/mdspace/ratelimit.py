"""Per-session write throttle backed by Redis."""

from datetime import datetime

import redis

from backend.mdspace.db.context import SessionContext
from backend.mdspace.db.repositories import RetryAfter

# Write buckets: shares and comments are throttled independently
SHARE_BUCKET = "share"
COMMENT_BUCKET = "comment"


def make_rate_limit_key(ctx: SessionContext, bucket: str) -> str:
    """Throttle key for one session's writes in one bucket."""
    return f"{ctx.session_id}:{bucket}"


class RedisRateLimiter:
    """Fixed-window counter shared by all API workers."""

    def __init__(self, redis_client: redis.Redis, max_requests: int, window_seconds: int = 60) -> None:
        """Initialize rate limiter.

        Args:
            redis_client: Redis client
            max_requests: Writes allowed per window
            window_seconds: Window size in seconds (default 60)
        """
        self._redis = redis_client
        self._max_requests = max_requests
        self._window_seconds = window_seconds

    def window_key(self, key: str, now: datetime) -> str:
        """Redis key of the window that contains now."""
        window_start = int(now.timestamp()) // self._window_seconds * self._window_seconds
        return f"ratelimit:{key}:{window_start}"

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Count one write and report whether it is over quota.

        Returns:
            RetryAfter if over quota, None if allowed
        """
        redis_key = self.window_key(key, now)

        pipe = self._redis.pipeline()
        pipe.incr(redis_key)
        pipe.ttl(redis_key)
        count, ttl = pipe.execute()

        if ttl < 0:
            # First write in this window, or a counter left without expiry
            self._redis.expire(redis_key, self._window_seconds)
            ttl = self._window_seconds

        if count > self._max_requests:
            return RetryAfter(seconds=max(1, ttl))

        return None
