"""Share link endpoint - GET /view/{id} redirects to the viewer page."""

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from backend.mdspace.config import Settings, get_settings

router = APIRouter()


def build_viewer_url(ui_origin: str, markdown_id: str) -> str:
    """Viewer page URL in the UI for a document."""
    return f"{ui_origin.rstrip('/')}/viewer?id={quote(markdown_id)}"


@router.get("/view/{markdown_id}")
async def view_page(
    markdown_id: str,
    settings: Annotated[Settings, Depends(get_settings)],
) -> RedirectResponse:
    """Redirect a share link to the viewer."""
    return RedirectResponse(build_viewer_url(settings.ui_origin, markdown_id))
