"""Repository protocol interfaces for data access."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from backend.mdspace.models.markdown import Comment, Markdown


class MarkdownStore(Protocol):
    """Store for shared markdown documents and their comments."""

    def save_markdown(self, content: str, owner_id: str) -> Markdown:
        """Store a new markdown document.

        Args:
            content: Markdown text
            owner_id: Session id of the creator

        Returns:
            Stored document

        Raises:
            QuotaExceededError: If the owner already has the maximum number of live files
        """
        ...

    def get_markdown(self, markdown_id: str) -> Markdown | None:
        """Get markdown document by ID.

        Args:
            markdown_id: Document ID

        Returns:
            Document or None if not found or expired
        """
        ...

    def increment_views(self, markdown_id: str) -> int:
        """Atomically increment the view count.

        Args:
            markdown_id: Document ID

        Returns:
            New view count
        """
        ...

    def delete_markdown(self, markdown_id: str, owner_id: str) -> None:
        """Delete a document, its comments and its quota slot.

        Args:
            markdown_id: Document ID
            owner_id: Session id of the requester

        Raises:
            NotFoundError: If the document does not exist
            PermissionDeniedError: If the requester is not the owner
        """
        ...

    def count_user_files(self, owner_id: str) -> int:
        """Count files owned by a session.

        Args:
            owner_id: Session id

        Returns:
            Number of owned files
        """
        ...

    def add_comment(self, markdown_id: str, *, line: int, text: str, author: str) -> Comment:
        """Append a comment to a document.

        Args:
            markdown_id: Document ID
            line: 1-based source line
            text: Comment text
            author: Display name

        Returns:
            Stored comment with id and created_at assigned
        """
        ...

    def list_comments(self, markdown_id: str) -> list[Comment]:
        """List comments for a document in creation order.

        Args:
            markdown_id: Document ID

        Returns:
            Comments, oldest first
        """
        ...


@dataclass
class RetryAfter:
    """Rate limit retry-after information."""

    seconds: int


class RateLimiter(Protocol):
    """Rate limiter interface."""

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available.

        Args:
            key: Rate limit key
            now: Current timestamp

        Returns:
            RetryAfter if over quota, None if allowed
        """
        ...


def new_short_id() -> str:
    """Generate an 8-character opaque id for documents and comments."""
    return str(uuid.uuid4())[:8]
