"""Markdown document and comment domain models."""

from datetime import datetime

from pydantic import BaseModel, Field


class Markdown(BaseModel):
    """Stored markdown document.

    owner_id is the session id of the creator and never leaves the backend.
    """

    id: str
    content: str
    views: int = 0
    owner_id: str
    created_at: datetime
    expires_at: datetime


class Comment(BaseModel):
    """Text annotation anchored to one source line of a document."""

    id: str
    line: int = Field(..., ge=1)
    text: str
    author: str = "Anonymous"
    created_at: datetime


class UserStats(BaseModel):
    """Per-session quota usage, for display only."""

    files_count: int
    files_limit: int
