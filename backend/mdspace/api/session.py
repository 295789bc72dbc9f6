"""Session dependency.

Resolves the anonymous session id issued by the session middleware. There is
no login; the session id only decides document ownership and quota.
"""

from fastapi import HTTPException, Request, status

from backend.mdspace.config import get_settings
from backend.mdspace.db.context import SessionContext


async def get_session_context(request: Request) -> SessionContext:
    """Extract session context from the request.

    Args:
        request: Incoming request

    Returns:
        SessionContext with the requester's session id

    Raises:
        HTTPException: If no session id can be resolved
    """
    session_id = getattr(request.state, "session_id", None)

    if not session_id:
        # Middleware not installed (e.g. bare router in tests): fall back to the cookie
        session_id = request.cookies.get(get_settings().session_cookie_name)

    if not session_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing session",
        )

    return SessionContext(session_id=session_id)
