"""Comment endpoints - POST/GET /api/markdown/{id}/comments."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from backend.mdspace.api.deps import write_throttle
from backend.mdspace.config import Settings, get_settings
from backend.mdspace.db.repositories import MarkdownStore
from backend.mdspace.db.store import get_store
from backend.mdspace.errors import InvalidInputError, NotFoundError
from backend.mdspace.models.markdown import Comment
from backend.mdspace.ratelimit import COMMENT_BUCKET
from backend.mdspace.utils.metrics import metrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/markdown", tags=["comments"])

DEFAULT_AUTHOR = "Anonymous"


class CreateCommentRequest(BaseModel):
    """Request body for POST /api/markdown/{id}/comments."""

    line: int
    text: str
    author: str = ""


class CommentListResponse(BaseModel):
    """Response for GET /api/markdown/{id}/comments."""

    comments: list[Comment]


def normalize_author(author: str | None) -> str:
    """Trim the author name, defaulting blank names to Anonymous."""
    author = (author or "").strip()
    return author or DEFAULT_AUTHOR


@router.post(
    "/{markdown_id}/comments",
    response_model=Comment,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(write_throttle(COMMENT_BUCKET))],
)
async def create_comment(
    markdown_id: str,
    request: CreateCommentRequest,
    store: Annotated[MarkdownStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Comment:
    """Add a comment anchored to a source line.

    The line number is not checked against the document's line count; the
    viewer tolerates comments on lines it cannot find.

    Raises:
        NotFoundError: If the document does not exist
        InvalidInputError: If line < 1, text is blank or too long
    """
    if store.get_markdown(markdown_id) is None:
        raise NotFoundError("Markdown not found")

    if request.line < 1:
        raise InvalidInputError("Line number must be positive")

    text = request.text.strip()
    if not text:
        raise InvalidInputError("Comment text cannot be empty")

    if len(text) > settings.max_comment_chars:
        raise InvalidInputError(
            f"Comment too long (max {settings.max_comment_chars} characters)"
        )

    comment = store.add_comment(
        markdown_id,
        line=request.line,
        text=text,
        author=normalize_author(request.author),
    )

    metrics.inc_comment_created()
    logger.info(f"[POST /api/markdown/{markdown_id}/comments] line={comment.line}")

    return comment


@router.get("/{markdown_id}/comments", response_model=CommentListResponse)
async def list_comments(
    markdown_id: str,
    store: Annotated[MarkdownStore, Depends(get_store)],
) -> CommentListResponse:
    """List comments in creation order."""
    return CommentListResponse(comments=store.list_comments(markdown_id))
