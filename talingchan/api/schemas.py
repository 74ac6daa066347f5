"""
Response models shared by the card and session endpoints.
"""

from pydantic import BaseModel, Field

from talingchan.models.card import Card
from talingchan.models.deck import DeckEntry
from talingchan.services.deck_session import DeckSession
from talingchan.services.presentation import OTHER_GROUP, DeckGroup


class CardResponse(BaseModel):
    """A catalog card."""

    name: str
    rule_name: str
    type: str | None = None
    symbol: str | None = None
    cost: str | None = None
    c_color: str | None = None
    gem: str | None = None
    g_color: str | None = None
    is_only_one: bool = False
    allowed_copies: int | None = None
    restriction_type_group_id: str | None = None
    group_id: str | None = None
    image_url: str | None = None
    is_life_card: bool = False


class DeckEntryResponse(BaseModel):
    """A main deck line."""

    card: CardResponse
    count: int


class DeckGroupResponse(BaseModel):
    """A display group of the main deck."""

    name: str
    total: int
    entries: list[DeckEntryResponse] = Field(default_factory=list)


class SessionResponse(BaseModel):
    """Full state of a deck session with its derived views."""

    session_id: str
    deck_name: str
    player_name: str
    main_deck: list[DeckEntryResponse]
    life_deck: list[CardResponse]
    main_deck_total: int
    main_deck_limit: int
    life_deck_total: int
    life_deck_limit: int
    groups: list[DeckGroupResponse]
    other: DeckGroupResponse | None = None


def card_response(card: Card, is_life_card: bool = False) -> CardResponse:
    return CardResponse(
        name=card.name,
        rule_name=card.rule_name,
        type=card.type,
        symbol=card.symbol,
        cost=card.cost,
        c_color=card.c_color,
        gem=card.gem,
        g_color=card.g_color,
        is_only_one=card.is_only_one,
        allowed_copies=card.allowed_copies,
        restriction_type_group_id=card.restriction_type_group_id,
        group_id=card.group_id,
        image_url=card.image_url,
        is_life_card=is_life_card,
    )


def _entry_response(entry: DeckEntry) -> DeckEntryResponse:
    return DeckEntryResponse(card=card_response(entry.card), count=entry.count)


def _group_response(group: DeckGroup) -> DeckGroupResponse:
    return DeckGroupResponse(
        name=group.name,
        total=group.total,
        entries=[_entry_response(entry) for entry in group.entries],
    )


def session_response(session_id: str, session: DeckSession) -> SessionResponse:
    grouped = session.grouped()
    other = grouped[OTHER_GROUP]

    return SessionResponse(
        session_id=session_id,
        deck_name=session.deck_name,
        player_name=session.player_name,
        main_deck=[_entry_response(entry) for entry in session.main_deck],
        life_deck=[card_response(card, is_life_card=True) for card in session.life_deck],
        main_deck_total=session.main_deck_total(),
        main_deck_limit=session.rules.main_deck_limit,
        life_deck_total=session.life_deck_total(),
        life_deck_limit=session.rules.life_deck_limit,
        groups=[_group_response(group) for group in grouped.ordered_groups()],
        other=_group_response(other) if other.entries else None,
    )
