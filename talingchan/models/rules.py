"""
Deck rules as data.

Every string-based classification the legality engine relies on lives
here, so a rule can be changed or extended without touching the engine.
"""

from dataclasses import dataclass, field

from talingchan.models.card import Card

MAIN_DECK_LIMIT = 50
LIFE_DECK_LIMIT = 5
DEFAULT_CARD_LIMIT = 4

LIFE_CARD_MARKER = "_Life"

AVATAR_TYPE = "Avatar"
MAGIC_TYPE = "Magic"
CONSTRUCT_TYPE = "Construct"

# เมียพระอิศวร may only share a deck with เทพ avatars
MEAR_PRA_ISUAN_RULE_NAME = "เมียพระอิศวร"
THEP_SYMBOL = "เทพ"


@dataclass(frozen=True)
class ExclusiveAvatarRule:
    """
    A named card that excludes every avatar outside one symbol.

    While `rule_name` is in the main deck, only avatars whose symbol equals
    `allowed_symbol` may be present, and the reverse.
    """

    rule_name: str
    allowed_symbol: str
    avatar_type: str = AVATAR_TYPE

    def is_guarded_card(self, card: Card) -> bool:
        return card.rule_name == self.rule_name

    def is_disqualifying_avatar(self, card: Card) -> bool:
        return card.type == self.avatar_type and card.symbol != self.allowed_symbol


@dataclass(frozen=True)
class DeckRules:
    """Limits and classification rules for one game format."""

    main_deck_limit: int = MAIN_DECK_LIMIT
    life_deck_limit: int = LIFE_DECK_LIMIT
    default_card_limit: int = DEFAULT_CARD_LIMIT
    life_card_marker: str = LIFE_CARD_MARKER
    exclusive_restriction_types: frozenset[str] = frozenset({"Choice", "Incompatible"})
    exclusive_avatar_rules: tuple[ExclusiveAvatarRule, ...] = field(
        default=(ExclusiveAvatarRule(MEAR_PRA_ISUAN_RULE_NAME, THEP_SYMBOL),)
    )

    def is_life_card(self, card: Card) -> bool:
        """Life cards carry the marker in their name or rule name."""
        return self.life_card_marker in card.name or self.life_card_marker in card.rule_name

    def effective_limit(self, card: Card) -> int:
        """Copies of this rule name allowed in the main deck (0 = banned)."""
        if card.allowed_copies is None:
            return self.default_card_limit
        return card.allowed_copies

    def has_exclusive_restriction(self, card: Card) -> bool:
        return (
            card.restriction_type_group_id in self.exclusive_restriction_types
            and card.group_id is not None
        )


DEFAULT_RULES = DeckRules()
