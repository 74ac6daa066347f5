from talingchan.models.card import FILTER_CATEGORIES, NUMERIC_CATEGORIES, Card
from talingchan.models.deck import DeckEntry, DeckSnapshot
from talingchan.models.failure import (
    STANDARD_MESSAGES,
    STANDARD_SUGGESTIONS,
    ApiResponse,
    FailureDetail,
    FailureKind,
    KnownError,
    OutcomeType,
    RefusalError,
    create_unknown_failure,
    finalize_response,
    is_finalized,
)
from talingchan.models.rules import (
    DEFAULT_CARD_LIMIT,
    DEFAULT_RULES,
    LIFE_DECK_LIMIT,
    MAIN_DECK_LIMIT,
    DeckRules,
    ExclusiveAvatarRule,
)

__all__ = [
    "ApiResponse",
    "Card",
    "DEFAULT_CARD_LIMIT",
    "DEFAULT_RULES",
    "DeckEntry",
    "DeckRules",
    "DeckSnapshot",
    "ExclusiveAvatarRule",
    "FILTER_CATEGORIES",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "LIFE_DECK_LIMIT",
    "MAIN_DECK_LIMIT",
    "NUMERIC_CATEGORIES",
    "OutcomeType",
    "RefusalError",
    "STANDARD_MESSAGES",
    "STANDARD_SUGGESTIONS",
    "create_unknown_failure",
    "finalize_response",
    "is_finalized",
]
