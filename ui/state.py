"""View state and event dispatchers for the composer and viewer pages.

The pages hold one state object each in st.session_state and route every UI
event through a dispatcher here. Dispatchers catch API failures at the call
site, set a transient notice, and leave the view as it was before the action.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from backend.mdspace.document.anchored import LineAnchoredDocument
from backend.mdspace.document.render import MarkdownRenderer, RenderedView, get_renderer
from backend.mdspace.errors import ErrorKind, InvalidInputError
from backend.mdspace.models.markdown import Comment, UserStats
from ui.helpers import ApiError, MdspaceClient, is_markdown_upload

logger = logging.getLogger(__name__)


@dataclass
class Notice:
    """Transient message shown to the user."""

    level: str  # "success" | "error" | "info"
    message: str


@dataclass
class ViewerState:
    """State of the viewer page for one document."""

    markdown_id: str
    status: str = "loading"  # loading | ready | not_found
    content: str = ""
    views: int = 0
    expires_at: datetime | None = None
    is_owner: bool = False
    comments: list[Comment] = field(default_factory=list)
    selected_line: int | None = None
    form_open: bool = False
    draft_text: str = ""
    draft_author: str = ""
    submitting: bool = False
    focused_line: int | None = None
    deleted: bool = False
    notice: Notice | None = None

    @property
    def document(self) -> LineAnchoredDocument:
        """Line-anchored view of the current content."""
        return LineAnchoredDocument(self.content)


def show_not_found(state: ViewerState) -> ViewerState:
    """Switch to the terminal not-found state with nothing rendered."""
    state.status = "not_found"
    state.content = ""
    state.comments = []
    state.is_owner = False
    state.form_open = False
    state.selected_line = None
    state.focused_line = None
    return state


def load_document(state: ViewerState, client: MdspaceClient) -> ViewerState:
    """Fetch the document, then its comments."""
    if not state.markdown_id:
        return show_not_found(state)

    try:
        data = client.get_markdown(state.markdown_id)
    except ApiError as e:
        if e.kind != ErrorKind.not_found:
            logger.error(f"Error loading markdown {state.markdown_id}: {e.message}")
            state.notice = Notice("error", "Failed to load markdown")
        return show_not_found(state)

    state.content = data["content"]
    state.views = data["views"]
    state.expires_at = datetime.fromisoformat(data["expires_at"])
    state.is_owner = bool(data["is_owner"])
    state.status = "ready"

    return refresh_comments(state, client)


def refresh_comments(state: ViewerState, client: MdspaceClient) -> ViewerState:
    """Replace the comment list with a fresh fetch.

    On failure the previous list is kept as it was.
    """
    try:
        comments = client.list_comments(state.markdown_id)
    except ApiError as e:
        logger.warning(f"Error loading comments for {state.markdown_id}: {e.message}")
        state.notice = Notice("error", "Failed to load comments")
        return state

    state.comments = comments
    return state


def open_comment_form(state: ViewerState, line: int) -> ViewerState:
    """Select a line and open the comment form for it."""
    try:
        selection = state.document.select_line(line)
    except InvalidInputError as e:
        state.notice = Notice("error", e.message)
        return state

    state.selected_line = selection.line
    state.form_open = True
    state.focused_line = selection.line if selection.exists else None
    return state


def cancel_comment(state: ViewerState) -> ViewerState:
    """Close the comment form and clear the draft."""
    state.selected_line = None
    state.form_open = False
    state.draft_text = ""
    state.draft_author = ""
    return state


def submit_comment(state: ViewerState, client: MdspaceClient) -> bool:
    """Submit the drafted comment.

    The comment list is reloaded before the form is dismissed. On failure the
    form stays open with the draft intact.

    Returns:
        True if the comment was stored
    """
    if state.submitting:
        return False

    text = state.draft_text.strip()
    if not text:
        state.notice = Notice("error", "Please enter a comment")
        return False

    if state.selected_line is None:
        state.notice = Notice("error", "Select a line to comment on")
        return False

    state.submitting = True
    state.notice = None
    try:
        client.add_comment(
            state.markdown_id,
            line=state.selected_line,
            text=text,
            author=state.draft_author,
        )
        refresh_comments(state, client)
    except ApiError as e:
        state.notice = Notice("error", e.message)
        return False
    finally:
        state.submitting = False

    cancel_comment(state)
    if state.notice is not None:
        # Stored, but the list on screen is stale
        state.notice = Notice("error", "Comment added, but failed to reload comments")
    else:
        state.notice = Notice("success", "Comment added!")
    return True


def focus_comment(state: ViewerState, comment: Comment) -> int | None:
    """Scroll/highlight target for a comment; None means do nothing."""
    line = state.document.project_comment_to_line(comment)
    if line is not None:
        state.focused_line = line
    return line


def delete_document(state: ViewerState, client: MdspaceClient) -> bool:
    """Delete the document (owner only; enforced by the backend)."""
    try:
        client.delete_markdown(state.markdown_id)
    except ApiError as e:
        state.notice = Notice("error", e.message)
        return False

    state.deleted = True
    state.notice = Notice("success", "Markdown deleted")
    return True


def render_view(state: ViewerState, renderer: MarkdownRenderer | None = None) -> RenderedView:
    """Render both views with comment markers and the focused line."""
    return state.document.render(state.comments, focused=state.focused_line, renderer=renderer)


@dataclass
class ComposerState:
    """State of the composer page."""

    content: str = ""
    preview_html: str = ""
    share_url: str | None = None
    expires_at: datetime | None = None
    stats: UserStats | None = None
    notice: Notice | None = None

    @property
    def can_share(self) -> bool:
        """Share is enabled only for non-blank content."""
        return bool(self.content.strip())


def update_preview(
    state: ComposerState, content: str, renderer: MarkdownRenderer | None = None
) -> ComposerState:
    """Store content and recompute the preview."""
    state.content = content
    trimmed = content.strip()

    if not trimmed:
        state.preview_html = ""
        return state

    state.preview_html = (renderer or get_renderer()).render_html(trimmed)
    return state


def load_file(
    state: ComposerState,
    filename: str,
    data: bytes,
    content_type: str | None = None,
    renderer: MarkdownRenderer | None = None,
) -> ComposerState:
    """Load an uploaded markdown file into the editor."""
    if not is_markdown_upload(filename, content_type):
        state.notice = Notice("error", "Please upload a markdown file (.md)")
        return state

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        state.notice = Notice("error", "Failed to read file")
        return state

    update_preview(state, text, renderer=renderer)
    state.notice = Notice("success", "File loaded successfully")
    return state


def load_user_stats(state: ComposerState, client: MdspaceClient) -> ComposerState:
    """Refresh quota display; failures only hide the numbers."""
    try:
        state.stats = client.get_user_stats()
    except ApiError as e:
        logger.warning(f"Failed to load user stats: {e.message}")
    return state


def share_document(state: ComposerState, client: MdspaceClient) -> bool:
    """Create a share link for the current content.

    Returns:
        True if a share link was created
    """
    try:
        data = client.create_markdown(state.content)
    except ApiError as e:
        state.notice = Notice("error", e.message)
        return False

    state.share_url = data["share_url"]
    state.expires_at = datetime.fromisoformat(data["expires_at"])
    load_user_stats(state, client)
    return True


def close_share(state: ComposerState) -> ComposerState:
    """Dismiss the share result and reset the editor."""
    state.share_url = None
    state.expires_at = None
    return update_preview(state, "")
