"""Streamlit UI for mdspace - composer page (write or upload, preview, share).

Run with: streamlit run ui/app.py
"""

# Add project root to sys.path for imports to work when run via streamlit
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import os  # noqa: E402
import uuid  # noqa: E402

import streamlit as st  # noqa: E402

from ui.helpers import MdspaceClient  # noqa: E402
from ui.state import (  # noqa: E402
    ComposerState,
    close_share,
    load_file,
    load_user_stats,
    share_document,
    update_preview,
)

# Configuration
BACKEND_URL = os.environ.get("MDSPACE_BACKEND_URL", "http://localhost:8000")

# Page config
st.set_page_config(page_title="mdspace", page_icon="📝", layout="wide")

# Initialize session state
if "session_id" not in st.session_state:
    st.session_state.session_id = str(uuid.uuid4())
if "composer" not in st.session_state:
    st.session_state.composer = ComposerState()

composer: ComposerState = st.session_state.composer
if "client" not in st.session_state:
    st.session_state.client = MdspaceClient(BACKEND_URL, st.session_state.session_id)
client: MdspaceClient = st.session_state.client

if composer.stats is None:
    load_user_stats(composer, client)


def _reset_editor() -> None:
    close_share(composer)
    st.session_state.editor = ""


# Title
st.title("📝 mdspace")
st.markdown("*Paste markdown, get a link. Links expire after 24 hours.*")
if composer.stats is not None:
    st.caption(f"Files: {composer.stats.files_count} / {composer.stats.files_limit}")
st.divider()

col_editor, col_preview = st.columns(2)

# =============================================================================
# LEFT COLUMN - EDITOR
# =============================================================================
with col_editor:
    st.subheader("✏️ Markdown")

    uploaded = st.file_uploader("Load a file", type=["md", "markdown"])
    if uploaded is not None and st.session_state.get("last_upload") != uploaded.file_id:
        st.session_state.last_upload = uploaded.file_id
        load_file(composer, uploaded.name, uploaded.getvalue(), uploaded.type)
        st.session_state.editor = composer.content

    # Preview recomputes once per committed edit (Streamlit reruns on change)
    content = st.text_area("Content", key="editor", height=480, label_visibility="collapsed")
    if content != composer.content:
        update_preview(composer, content)

    col_clear, col_share = st.columns(2)
    with col_clear:
        st.button("Clear", on_click=_reset_editor, use_container_width=True)
    with col_share:
        if st.button(
            "🔗 Create Share Link",
            type="primary",
            disabled=not composer.can_share,
            use_container_width=True,
        ):
            with st.spinner("Creating..."):
                share_document(composer, client)

    if composer.share_url:
        st.success("Share link created!")
        st.code(composer.share_url, language=None)
        if composer.expires_at is not None:
            st.caption(f"This link will expire on {composer.expires_at.strftime('%Y-%m-%d %H:%M %Z')}")
        st.link_button("Open", composer.share_url)
        st.button("Done", on_click=_reset_editor)

# =============================================================================
# RIGHT COLUMN - PREVIEW
# =============================================================================
with col_preview:
    st.subheader("👀 Preview")
    if composer.preview_html:
        st.markdown(composer.preview_html, unsafe_allow_html=True)
    else:
        st.info("Your markdown preview will appear here...")

# Notices are transient: show once, then clear
if composer.notice is not None:
    if composer.notice.level == "error":
        st.error(composer.notice.message)
    else:
        st.toast(composer.notice.message)
    composer.notice = None

