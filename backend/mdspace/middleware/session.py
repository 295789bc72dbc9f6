"""Anonymous session cookie middleware.

Every request gets a session id: the value of the session cookie when present,
otherwise a fresh UUID that is set as a cookie on the response.
"""

import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response

from backend.mdspace.config import get_settings


async def session_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Attach the session id to request.state and issue a cookie when missing."""
    settings = get_settings()
    session_id = request.cookies.get(settings.session_cookie_name)
    issued = not session_id

    if issued:
        session_id = str(uuid.uuid4())

    request.state.session_id = session_id
    response = await call_next(request)

    if issued:
        response.set_cookie(
            key=settings.session_cookie_name,
            value=session_id,
            path="/",
            max_age=settings.session_max_age_seconds,
            httponly=True,
            samesite="lax",
            secure=settings.session_cookie_secure,
        )

    return response
