"""Shared route dependencies."""

import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Annotated

from fastapi import Depends, Request

from backend.mdspace.api.session import get_session_context
from backend.mdspace.db.context import SessionContext
from backend.mdspace.db.repositories import RateLimiter
from backend.mdspace.db.store import get_rate_limiter
from backend.mdspace.errors import QuotaExceededError
from backend.mdspace.ratelimit import make_rate_limit_key
from backend.mdspace.utils.metrics import metrics

logger = logging.getLogger(__name__)


def write_throttle(bucket: str) -> Callable[..., Awaitable[None]]:
    """Build a dependency that throttles one kind of write per session.

    Usage:
        @router.post("", dependencies=[Depends(write_throttle(SHARE_BUCKET))])

    Args:
        bucket: Bucket name; each bucket has its own per-session window
    """

    async def enforce(
        request: Request,
        ctx: Annotated[SessionContext, Depends(get_session_context)],
        limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
    ) -> None:
        retry_after = limiter.check_quota(make_rate_limit_key(ctx, bucket), datetime.now(UTC))
        if retry_after is None:
            return

        logger.info(
            f"[{request.method} {request.url.path}] throttled bucket={bucket}, "
            f"retry_after={retry_after.seconds}"
        )
        metrics.inc_quota_rejection("throttle")
        raise QuotaExceededError("Too many requests", retry_after=retry_after.seconds)

    return enforce
