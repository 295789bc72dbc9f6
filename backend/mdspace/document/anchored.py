"""Line-anchored document - keeps source lines, rendering and comments consistent.

The document is a pure function of (content, comments, selection). View state
such as the selected line or the cached comment list is owned by the caller
and passed in, never held here.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from backend.mdspace.document.lines import Line, split_lines
from backend.mdspace.document.render import MarkdownRenderer, RenderedView, render_lines
from backend.mdspace.errors import InvalidInputError


class LineAnchored(Protocol):
    """Anything anchored to a source line (comments)."""

    line: int


@dataclass(frozen=True)
class Selection:
    """Result of selecting a line.

    Selection is advisory: a positive line number with no matching line is
    accepted but flagged, and anchoring to it is a no-op.
    """

    line: int
    exists: bool


@dataclass(frozen=True)
class AnnotatedView:
    """Lines plus the set of line numbers carrying at least one comment."""

    lines: tuple[Line, ...]
    annotated: frozenset[int]
    comments: tuple[LineAnchored, ...]  # fetch order, never re-sorted

    def is_annotated(self, line_number: int) -> bool:
        """Check whether a line has at least one comment."""
        return line_number in self.annotated


class LineAnchoredDocument:
    """Markdown document addressable by 1-based source line numbers."""

    def __init__(self, content: str) -> None:
        self.content = content
        self.lines: tuple[Line, ...] = tuple(split_lines(content))

    @property
    def line_count(self) -> int:
        """Number of source lines (always >= 1)."""
        return len(self.lines)

    def has_line(self, line_number: int) -> bool:
        """Check whether a line number exists in the current content."""
        return 1 <= line_number <= len(self.lines)

    def get_line(self, line_number: int) -> Line | None:
        """Get a line by number, None when absent."""
        if not self.has_line(line_number):
            return None
        return self.lines[line_number - 1]

    def select_line(self, line_number: int) -> Selection:
        """Select a line for commenting.

        Raises:
            InvalidInputError: If line_number is not a positive integer
        """
        if isinstance(line_number, bool) or not isinstance(line_number, int) or line_number < 1:
            raise InvalidInputError("Line number must be positive")
        return Selection(line=line_number, exists=self.has_line(line_number))

    def attach_comments(self, comments: Sequence[LineAnchored]) -> AnnotatedView:
        """Mark every line that has at least one comment.

        Always rebuilt from the full comment list so that no state from an
        earlier list survives a refresh.
        """
        return AnnotatedView(
            lines=self.lines,
            annotated=frozenset(c.line for c in comments),
            comments=tuple(comments),
        )

    def project_comment_to_line(self, comment: LineAnchored) -> int | None:
        """Map a comment to its line in the current rendering.

        Returns:
            The line number, or None (not found) when the document has no such
            line. Callers treat None as "do nothing".
        """
        if not self.has_line(comment.line):
            return None
        return comment.line

    def render(
        self,
        comments: Sequence[LineAnchored] = (),
        *,
        focused: int | None = None,
        renderer: MarkdownRenderer | None = None,
    ) -> RenderedView:
        """Render both views from this document's single line split."""
        annotated = self.attach_comments(comments).annotated
        if focused is not None and not self.has_line(focused):
            focused = None
        return render_lines(
            self.content,
            list(self.lines),
            renderer=renderer,
            annotated=annotated,
            focused=focused,
        )
