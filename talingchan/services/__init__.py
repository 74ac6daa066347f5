"""
Talingchan deck builder services.

Legality engine, catalog search, presentation and exports.
"""

from talingchan.services.card_search import CardQuery, search_cards
from talingchan.services.catalog import CardCatalog, CatalogError, fetch_catalog, parse_catalog
from talingchan.services.deck_session import (
    BannedCardError,
    ClearNotConfirmedError,
    CopyLimitError,
    DeckSession,
    ExclusiveAvatarConflictError,
    LegalityError,
    LifeCardInMainDeckError,
    LifeDeckDuplicateError,
    LifeDeckFullError,
    MainDeckFullError,
    NotALifeCardError,
    OnlyOneConflictError,
    RestrictionGroupConflictError,
)
from talingchan.services.filter_index import build_filter_index
from talingchan.services.image_export import export_decklist_image, render_decklist_png
from talingchan.services.presentation import (
    GROUP_ORDER,
    DeckGroup,
    GroupedDeck,
    group_main_deck,
    sort_main_deck,
)
from talingchan.services.session_store import SessionNotFoundError, SessionStore
from talingchan.services.tournament_export import (
    ExportedFile,
    ExportError,
    ExportValidationError,
    build_tournament_payload,
    export_tournament_sheet,
    validate_tournament_export,
)

__all__ = [
    "BannedCardError",
    "CardCatalog",
    "CardQuery",
    "CatalogError",
    "ClearNotConfirmedError",
    "CopyLimitError",
    "DeckGroup",
    "DeckSession",
    "ExclusiveAvatarConflictError",
    "ExportError",
    "ExportValidationError",
    "ExportedFile",
    "GROUP_ORDER",
    "GroupedDeck",
    "LegalityError",
    "LifeCardInMainDeckError",
    "LifeDeckDuplicateError",
    "LifeDeckFullError",
    "MainDeckFullError",
    "NotALifeCardError",
    "OnlyOneConflictError",
    "RestrictionGroupConflictError",
    "SessionNotFoundError",
    "SessionStore",
    "build_filter_index",
    "build_tournament_payload",
    "export_decklist_image",
    "export_tournament_sheet",
    "fetch_catalog",
    "group_main_deck",
    "parse_catalog",
    "render_decklist_png",
    "search_cards",
    "sort_main_deck",
    "validate_tournament_export",
]
