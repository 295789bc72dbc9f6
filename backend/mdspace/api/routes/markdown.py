"""Markdown endpoints - POST /api/markdown, GET/DELETE /api/markdown/{id}."""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from backend.mdspace.api.deps import write_throttle
from backend.mdspace.api.session import get_session_context
from backend.mdspace.config import Settings, get_settings
from backend.mdspace.db.context import SessionContext
from backend.mdspace.db.repositories import MarkdownStore
from backend.mdspace.db.store import get_store
from backend.mdspace.errors import InvalidInputError, NotFoundError, QuotaExceededError
from backend.mdspace.ratelimit import SHARE_BUCKET
from backend.mdspace.utils.metrics import metrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/markdown", tags=["markdown"])


class CreateMarkdownRequest(BaseModel):
    """Request body for POST /api/markdown."""

    content: str


class CreateMarkdownResponse(BaseModel):
    """Response for POST /api/markdown."""

    id: str
    share_url: str
    expires_at: datetime


class MarkdownResponse(BaseModel):
    """Response for GET /api/markdown/{id}."""

    id: str
    content: str
    views: int
    is_owner: bool
    created_at: datetime
    expires_at: datetime


def build_share_url(base_url: str, markdown_id: str) -> str:
    """Build the public viewer URL for a document."""
    return f"{base_url.rstrip('/')}/view/{markdown_id}"


@router.post(
    "",
    response_model=CreateMarkdownResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(write_throttle(SHARE_BUCKET))],
)
async def create_markdown(
    request: CreateMarkdownRequest,
    ctx: Annotated[SessionContext, Depends(get_session_context)],
    store: Annotated[MarkdownStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CreateMarkdownResponse:
    """Share a markdown document.

    Args:
        request: Document content
        ctx: Session context (becomes the owner)
        store: Markdown store
        settings: Application settings

    Returns:
        Document id, share URL and expiry

    Raises:
        InvalidInputError: If content is blank or too large
        QuotaExceededError: If the session already has the maximum number of files
    """
    if not request.content.strip():
        raise InvalidInputError("Content cannot be empty")

    if len(request.content.encode("utf-8")) > settings.max_content_bytes:
        raise InvalidInputError(f"Content too large (max {settings.max_content_bytes // 1024} KB)")

    try:
        doc = store.save_markdown(request.content, ctx.session_id)
    except QuotaExceededError:
        metrics.inc_quota_rejection("files")
        raise

    metrics.inc_markdown_created()
    logger.info(f"[POST /api/markdown] id={doc.id}, bytes={len(doc.content)}")

    return CreateMarkdownResponse(
        id=doc.id,
        share_url=build_share_url(settings.base_url, doc.id),
        expires_at=doc.expires_at,
    )


@router.get("/{markdown_id}", response_model=MarkdownResponse)
async def get_markdown(
    markdown_id: str,
    ctx: Annotated[SessionContext, Depends(get_session_context)],
    store: Annotated[MarkdownStore, Depends(get_store)],
) -> MarkdownResponse:
    """Fetch a shared document and count the view.

    Raises:
        NotFoundError: If the document does not exist or has expired
    """
    doc = store.get_markdown(markdown_id)
    if doc is None:
        raise NotFoundError("Markdown not found")

    views = store.increment_views(markdown_id)
    if views == 0:
        # Expired between the read and the increment
        raise NotFoundError("Markdown not found")

    return MarkdownResponse(
        id=doc.id,
        content=doc.content,
        views=views,
        is_owner=doc.owner_id == ctx.session_id,
        created_at=doc.created_at,
        expires_at=doc.expires_at,
    )


@router.delete("/{markdown_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_markdown(
    markdown_id: str,
    ctx: Annotated[SessionContext, Depends(get_session_context)],
    store: Annotated[MarkdownStore, Depends(get_store)],
) -> Response:
    """Delete a document. Only its owner may do so.

    Raises:
        NotFoundError: If the document does not exist
        PermissionDeniedError: If the requester is not the owner
    """
    store.delete_markdown(markdown_id, ctx.session_id)

    metrics.inc_markdown_deleted()
    logger.info(f"[DELETE /api/markdown/{markdown_id}] deleted")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
