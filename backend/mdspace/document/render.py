"""Markdown rendering - rendered HTML plus a line-numbered source listing."""

import html
import logging
from collections.abc import Collection
from dataclasses import dataclass

from markdown_it import MarkdownIt
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

from backend.mdspace.document.lines import Line, split_lines

logger = logging.getLogger(__name__)

_FORMATTER = HtmlFormatter(nowrap=True)


def highlight_code(code: str, lang: str, attrs: str = "") -> str:
    """Highlight a fenced code block.

    Used as the markdown-it ``highlight`` hook. Uses the lexer named by the
    fence info string, guessing one when the name is missing or unknown.

    Returns:
        Highlighted HTML, or "" when highlighting fails so the engine falls
        back to plain escaped code.
    """
    try:
        if lang:
            try:
                lexer = get_lexer_by_name(lang)
            except ClassNotFound:
                lexer = guess_lexer(code)
        else:
            lexer = guess_lexer(code)
        return highlight(code, lexer, _FORMATTER)
    except Exception as e:
        logger.debug(f"Highlighting failed for lang={lang!r}: {type(e).__name__}")
        return ""


class MarkdownRenderer:
    """GFM-flavoured markdown to HTML via markdown-it-py."""

    def __init__(self, *, breaks: bool = True, highlight_code_blocks: bool = True) -> None:
        """Initialize renderer.

        Args:
            breaks: Render single newlines as <br>
            highlight_code_blocks: Run fenced code through Pygments
        """
        options: dict[str, object] = {"html": False, "linkify": True, "breaks": breaks}
        if highlight_code_blocks:
            options["highlight"] = highlight_code
        self._md = MarkdownIt("commonmark", options).enable(["table", "strikethrough", "linkify"])

    def render_html(self, text: str) -> str:
        """Render markdown text to an HTML fragment."""
        return self._md.render(text)


def render_source_listing(
    lines: list[Line],
    annotated: Collection[int] = (),
    focused: int | None = None,
) -> str:
    """Render the line-numbered source view.

    Every line becomes one ``code-line`` element addressable by ``data-line``.
    Annotated lines get ``has-comment``; the focused line gets ``is-focused``.
    """
    rows = []
    for line in lines:
        classes = ["code-line"]
        if line.number in annotated:
            classes.append("has-comment")
        if line.number == focused:
            classes.append("is-focused")
        rows.append(
            f'<div class="{" ".join(classes)}" data-line="{line.number}">'
            f'<span class="line-number" data-line="{line.number}">{line.number}</span>'
            f'<span class="line-content">{html.escape(line.text)}</span>'
            "</div>"
        )
    return '<div class="line-numbered-content">' + "".join(rows) + "</div>"


@dataclass(frozen=True)
class RenderedView:
    """Rendered and source views built from the same line split."""

    html: str
    source_html: str
    lines: tuple[Line, ...]


_default_renderer: MarkdownRenderer | None = None


def get_renderer() -> MarkdownRenderer:
    """Get shared default renderer."""
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = MarkdownRenderer()
    return _default_renderer


def render(content: str, renderer: MarkdownRenderer | None = None) -> RenderedView:
    """Render content into rendered HTML and a line-numbered source listing."""
    return render_lines(content, split_lines(content), renderer=renderer)


def render_lines(
    content: str,
    lines: list[Line],
    *,
    renderer: MarkdownRenderer | None = None,
    annotated: Collection[int] = (),
    focused: int | None = None,
) -> RenderedView:
    """Render from an existing line split so both views share line numbers."""
    renderer = renderer or get_renderer()
    return RenderedView(
        html=renderer.render_html(content),
        source_html=render_source_listing(lines, annotated=annotated, focused=focused),
        lines=tuple(lines),
    )
