"""Streamlit UI for mdspace - viewer page (rendered/source views, line comments).

Opened through share links: /view/{id} on the backend redirects to ?id={id} here.
"""

# Add project root to sys.path for imports to work when run via streamlit
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[2]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import os  # noqa: E402
import uuid  # noqa: E402

import streamlit as st  # noqa: E402

from ui.helpers import (  # noqa: E402
    MdspaceClient,
    download_filename,
    format_relative_time,
    page_title,
)
from ui.state import (  # noqa: E402
    ViewerState,
    cancel_comment,
    delete_document,
    focus_comment,
    load_document,
    open_comment_form,
    render_view,
    submit_comment,
)

# Configuration
BACKEND_URL = os.environ.get("MDSPACE_BACKEND_URL", "http://localhost:8000")

SOURCE_VIEW_CSS = """
<style>
.line-numbered-content { font-family: monospace; font-size: 0.85rem; }
.code-line { display: flex; min-height: 1.4em; }
.code-line .line-number { width: 3.5em; color: #8b949e; text-align: right; padding-right: 1em; user-select: none; }
.code-line .line-content { white-space: pre-wrap; flex: 1; }
.code-line.has-comment { background: rgba(210, 153, 34, 0.15); }
.code-line.is-focused { background: rgba(88, 166, 255, 0.2); }
</style>
"""

markdown_id = st.query_params.get("id", "")

# Initialize session state
if "session_id" not in st.session_state:
    st.session_state.session_id = str(uuid.uuid4())

if "client" not in st.session_state:
    st.session_state.client = MdspaceClient(BACKEND_URL, st.session_state.session_id)
client: MdspaceClient = st.session_state.client

viewer: ViewerState | None = st.session_state.get("viewer")
if viewer is None or viewer.markdown_id != markdown_id:
    viewer = ViewerState(markdown_id=markdown_id)
    with st.spinner("Loading..."):
        load_document(viewer, client)
    st.session_state.viewer = viewer


def _open_form(line: int) -> None:
    open_comment_form(viewer, line)


def _cancel_form() -> None:
    cancel_comment(viewer)
    st.session_state.draft_text = ""
    st.session_state.draft_author = ""


def _submit_form() -> None:
    viewer.draft_text = st.session_state.get("draft_text", "")
    viewer.draft_author = st.session_state.get("draft_author", "")
    if submit_comment(viewer, client):
        st.session_state.draft_text = ""
        st.session_state.draft_author = ""


def _show_notice() -> None:
    # Notices are transient: show once, then clear
    if viewer.notice is None:
        return
    if viewer.notice.level == "error":
        st.error(viewer.notice.message)
    else:
        st.toast(viewer.notice.message)
    viewer.notice = None


if viewer.deleted:
    _show_notice()
    st.info("This markdown was deleted.")
    st.page_link("app.py", label="Create a new one", icon="📝")
    st.stop()

if viewer.status == "not_found":
    _show_notice()
    st.title("Not found")
    st.markdown("This markdown doesn't exist or has expired.")
    st.page_link("app.py", label="Create a new one", icon="📝")
    st.stop()

st.title(page_title(viewer.content))

# =============================================================================
# HEADER - STATS + ACTIONS
# =============================================================================
col_views, col_expiry, col_download, col_delete = st.columns(4)
with col_views:
    st.metric("Views", viewer.views)
with col_expiry:
    expires = format_relative_time(viewer.expires_at) if viewer.expires_at else "unknown"
    st.metric("Expires", expires)
with col_download:
    st.download_button(
        "⬇️ Download",
        data=viewer.content,
        file_name=download_filename(viewer.content),
        mime="text/markdown",
    )
with col_delete:
    if viewer.is_owner:
        confirmed = st.checkbox("Confirm delete (cannot be undone)")
        if st.button("🗑️ Delete", disabled=not confirmed):
            delete_document(viewer, client)
            st.rerun()

st.divider()

col_doc, col_comments = st.columns([3, 1.3])
view = render_view(viewer)

# =============================================================================
# LEFT COLUMN - RENDERED / SOURCE
# =============================================================================
with col_doc:
    tab_rendered, tab_source = st.tabs(["Rendered", "Source (for comments)"])

    with tab_rendered:
        st.markdown(view.html, unsafe_allow_html=True)

    with tab_source:
        line = st.number_input(
            "Line",
            min_value=1,
            max_value=viewer.document.line_count,
            value=viewer.selected_line or 1,
            step=1,
        )
        st.button("💬 Comment on this line", on_click=_open_form, args=(int(line),))
        st.markdown(SOURCE_VIEW_CSS + view.source_html, unsafe_allow_html=True)

# =============================================================================
# RIGHT COLUMN - COMMENTS
# =============================================================================
with col_comments:
    st.subheader(f"💬 Comments ({len(viewer.comments)})")

    if viewer.form_open and viewer.selected_line is not None:
        with st.container(border=True):
            st.markdown(f"**Line {viewer.selected_line}**")
            st.text_input("Name", key="draft_author", placeholder="Anonymous")
            st.text_area("Comment", key="draft_text")
            col_submit, col_cancel = st.columns(2)
            with col_submit:
                st.button(
                    "Submitting..." if viewer.submitting else "Submit",
                    type="primary",
                    disabled=viewer.submitting,
                    on_click=_submit_form,
                )
            with col_cancel:
                st.button("Cancel", on_click=_cancel_form)

    if not viewer.comments:
        st.caption("Pick a line in the Source view to add a comment")

    # Fetch order, never re-sorted by line
    for i, comment in enumerate(viewer.comments):
        with st.container(border=True):
            st.button(
                f"Line {comment.line}",
                key=f"comment-line-{i}",
                on_click=focus_comment,
                args=(viewer, comment),
            )
            st.caption(f"{comment.author} • {comment.created_at.strftime('%Y-%m-%d %H:%M')}")
            st.text(comment.text)

_show_notice()
