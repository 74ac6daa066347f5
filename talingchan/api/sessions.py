"""
Deck session API endpoints.

Each session holds one main deck and one life deck. Adds go through the
legality engine; a rejected add returns 409 with a refusal envelope and
leaves the session unchanged.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from talingchan.api.dependencies import get_catalog, get_store
from talingchan.api.schemas import SessionResponse, session_response
from talingchan.services.catalog import CardCatalog
from talingchan.services.session_store import SessionStore

router = APIRouter(prefix="/sessions", tags=["sessions"])


class SessionCreateRequest(BaseModel):
    deck_name: str = ""
    player_name: str = ""


class SessionUpdateRequest(BaseModel):
    deck_name: str | None = None
    player_name: str | None = None


class CardActionRequest(BaseModel):
    """Identifies a catalog card by rule name."""

    rule_name: str


class ClearRequest(BaseModel):
    confirm: bool = False


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    store: Annotated[SessionStore, Depends(get_store)],
    request: SessionCreateRequest | None = None,
) -> SessionResponse:
    """Start an empty deck session."""
    request = request or SessionCreateRequest()
    session_id, session = store.create(
        deck_name=request.deck_name, player_name=request.player_name
    )
    return session_response(session_id, session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session_state(
    session_id: str,
    store: Annotated[SessionStore, Depends(get_store)],
) -> SessionResponse:
    """Current decks, totals and display groups."""
    return session_response(session_id, store.get(session_id))


@router.patch("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: str,
    request: SessionUpdateRequest,
    store: Annotated[SessionStore, Depends(get_store)],
) -> SessionResponse:
    """Set the deck name and/or player name used by exports."""
    session = store.get(session_id)
    if request.deck_name is not None:
        session.deck_name = request.deck_name
    if request.player_name is not None:
        session.player_name = request.player_name
    return session_response(session_id, session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str,
    store: Annotated[SessionStore, Depends(get_store)],
) -> Response:
    store.delete(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{session_id}/main", response_model=SessionResponse)
async def add_to_main_deck(
    session_id: str,
    request: CardActionRequest,
    store: Annotated[SessionStore, Depends(get_store)],
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> SessionResponse:
    """
    Add one copy of a card to the main deck.

    Life cards are refused here; add them through the life deck endpoint.
    """
    session = store.get(session_id)
    session.add_to_main_deck(catalog.require(request.rule_name))
    return session_response(session_id, session)


@router.delete("/{session_id}/main/{rule_name}", response_model=SessionResponse)
async def remove_from_main_deck(
    session_id: str,
    rule_name: str,
    store: Annotated[SessionStore, Depends(get_store)],
) -> SessionResponse:
    """Remove one copy of a card from the main deck. Unknown cards are a no-op."""
    session = store.get(session_id)
    entry = session.find_entry(rule_name)
    if entry is not None:
        session.remove_from_main_deck(entry.card)
    return session_response(session_id, session)


@router.post("/{session_id}/life", response_model=SessionResponse)
async def add_to_life_deck(
    session_id: str,
    request: CardActionRequest,
    store: Annotated[SessionStore, Depends(get_store)],
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> SessionResponse:
    """Add a life card to the life deck."""
    session = store.get(session_id)
    session.add_to_life_deck(catalog.require(request.rule_name))
    return session_response(session_id, session)


@router.delete("/{session_id}/life/{rule_name}", response_model=SessionResponse)
async def remove_from_life_deck(
    session_id: str,
    rule_name: str,
    store: Annotated[SessionStore, Depends(get_store)],
) -> SessionResponse:
    session = store.get(session_id)
    member = next((card for card in session.life_deck if card.rule_name == rule_name), None)
    if member is not None:
        session.remove_from_life_deck(member)
    return session_response(session_id, session)


@router.post("/{session_id}/clear", response_model=SessionResponse)
async def clear_session(
    session_id: str,
    request: ClearRequest,
    store: Annotated[SessionStore, Depends(get_store)],
) -> SessionResponse:
    """Empty both decks. Requires `confirm: true`."""
    session = store.get(session_id)
    session.clear_all(confirm=request.confirm)
    return session_response(session_id, session)
