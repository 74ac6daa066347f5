"""
Deck export API endpoints.

Both exports work on a snapshot taken when the request arrives.
"""

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, Response

from talingchan.api.dependencies import get_settings, get_store
from talingchan.config import Settings
from talingchan.services.image_export import export_decklist_image
from talingchan.services.session_store import SessionStore
from talingchan.services.tournament_export import ExportedFile, export_tournament_sheet

router = APIRouter(prefix="/sessions", tags=["exports"])


def content_disposition(filename: str) -> str:
    """
    Attachment header carrying a UTF-8 filename (RFC 6266 / RFC 5987).

    Header values must be latin-1, so Thai names go in `filename*` and
    `filename` gets an ASCII stand-in for clients that ignore it.
    """
    fallback = "".join(
        char if char.isascii() and char not in '"\\' else "_" for char in filename
    )
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def _file_response(exported: ExportedFile) -> Response:
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": content_disposition(exported.filename)},
    )


@router.post("/{session_id}/export/tournament")
async def export_tournament(
    session_id: str,
    store: Annotated[SessionStore, Depends(get_store)],
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    """
    Download the tournament spreadsheet.

    Requires deck and player names, exactly 50 main deck cards and
    exactly 5 life cards; otherwise returns 422 without calling the
    spreadsheet service.
    """
    session = store.get(session_id)
    snapshot = session.snapshot()
    exported = await export_tournament_sheet(
        snapshot,
        app_settings.api_url,
        rules=session.rules,
        timeout=app_settings.request_timeout,
    )
    return _file_response(exported)


@router.post("/{session_id}/export/image")
async def export_image(
    session_id: str,
    store: Annotated[SessionStore, Depends(get_store)],
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    """Download the decklist as a PNG. Requires a deck name."""
    snapshot = store.get(session_id).snapshot()
    return _file_response(export_decklist_image(snapshot, font_path=app_settings.font_path))
