"""Source line splitting - deterministic, position-numbered lines."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Line:
    """One source line. Derived from content, never stored on its own."""

    number: int  # 1-based
    text: str


def split_lines(content: str) -> list[Line]:
    """Split document content into numbered lines.

    Pure function of content. Lines are numbered by position starting at 1
    with no gaps, so the same content always yields the same numbering.

    Args:
        content: Full document text, newline-delimited

    Returns:
        Ordered list of Line. Empty content yields a single empty line, and a
        trailing newline yields a trailing empty line.
    """
    return [Line(number=i, text=text) for i, text in enumerate(content.split("\n"), start=1)]


def join_lines(lines: list[Line]) -> str:
    """Rebuild content from lines (inverse of split_lines)."""
    return "\n".join(line.text for line in lines)
