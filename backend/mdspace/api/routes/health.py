"""Health check endpoints.

- /health is a liveness probe that never touches storage
- /healthz checks Redis connectivity when Redis is configured
"""

import redis
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from backend.mdspace.config import Settings, get_settings

router = APIRouter()


async def check_redis(settings: Settings) -> tuple[bool, str]:
    """Check Redis connectivity.

    Returns:
        (is_ok, status_message)
    """
    if not settings.redis_url:
        return (True, "not_configured")

    try:
        client = redis.from_url(settings.redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
        client.ping()
        return (True, "ok")
    except redis.RedisError as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, object] | JSONResponse:
    """Health check endpoint.

    Returns:
        200 with component status if storage is reachable
        503 if Redis is configured but unreachable
    """
    settings = get_settings()

    redis_ok, redis_status = await check_redis(settings)

    response_body: dict[str, object] = {
        "status": "ok" if redis_ok else "degraded",
        "components": {
            "store": "redis" if settings.redis_url else "memory",
            "redis": redis_status,
        },
    }

    if not redis_ok:
        return JSONResponse(content=response_body, status_code=503)

    return response_body
