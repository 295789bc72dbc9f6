"""User quota endpoint - GET /api/user/stats."""

from typing import Annotated

from fastapi import APIRouter, Depends

from backend.mdspace.api.session import get_session_context
from backend.mdspace.config import Settings, get_settings
from backend.mdspace.db.context import SessionContext
from backend.mdspace.db.repositories import MarkdownStore
from backend.mdspace.db.store import get_store
from backend.mdspace.models.markdown import UserStats

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/stats", response_model=UserStats)
async def user_stats(
    ctx: Annotated[SessionContext, Depends(get_session_context)],
    store: Annotated[MarkdownStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserStats:
    """Report how many files the session owns and the limit."""
    return UserStats(
        files_count=store.count_user_files(ctx.session_id),
        files_limit=settings.max_files_per_user,
    )
