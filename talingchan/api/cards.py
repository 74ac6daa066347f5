"""
Card catalog API endpoints.

Browse the catalog with text search and attribute filters, and list the
values each filter offers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from talingchan.api.dependencies import get_catalog
from talingchan.api.schemas import CardResponse, card_response
from talingchan.models.rules import DEFAULT_RULES
from talingchan.services.card_search import CardQuery, search_cards
from talingchan.services.catalog import CardCatalog
from talingchan.services.filter_index import build_filter_index

router = APIRouter(prefix="/cards", tags=["cards"])


class CardListResponse(BaseModel):
    """Response model for a filtered card list."""

    loading: bool
    cards: list[CardResponse]
    count: int


class FilterIndexResponse(BaseModel):
    """Values offered by each filter category."""

    filters: dict[str, list[str]]


@router.get("", response_model=CardListResponse)
async def list_cards(
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
    q: str = "",
    type_: Annotated[list[str] | None, Query(alias="type")] = None,
    symbol: Annotated[list[str] | None, Query()] = None,
    cost: Annotated[list[str] | None, Query()] = None,
    c_color: Annotated[list[str] | None, Query()] = None,
    gem: Annotated[list[str] | None, Query()] = None,
    g_color: Annotated[list[str] | None, Query()] = None,
) -> CardListResponse:
    """
    List catalog cards matching a search.

    Repeat a filter parameter to select several values (ORed); different
    filters are ANDed. Returns `loading=true` and no cards until the
    catalog has been fetched.
    """
    if not catalog.loaded:
        return CardListResponse(loading=True, cards=[], count=0)

    query = CardQuery.build(
        text=q,
        filters={
            "Type": type_ or [],
            "Symbol": symbol or [],
            "Cost": cost or [],
            "C Color": c_color or [],
            "Gem": gem or [],
            "G Color": g_color or [],
        },
    )
    matches = search_cards(catalog.cards, query)

    return CardListResponse(
        loading=False,
        cards=[card_response(card, DEFAULT_RULES.is_life_card(card)) for card in matches],
        count=len(matches),
    )


@router.get("/filters", response_model=FilterIndexResponse)
async def list_filters(
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> FilterIndexResponse:
    """Distinct sorted values of every filter category."""
    return FilterIndexResponse(filters=build_filter_index(catalog.cards))
