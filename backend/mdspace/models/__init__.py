"""Models package - re-exports for convenience."""

from backend.mdspace.models.markdown import Comment, Markdown, UserStats

__all__ = ["Comment", "Markdown", "UserStats"]
