"""
Catalog search.

A CardQuery combines free text with multi-select attribute filters:
- Text matches Name or RuleName, case-insensitively; empty text matches all
- Categories are ANDed together
- Values selected within one category are ORed
- A category with nothing selected does not constrain
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from talingchan.models.card import FILTER_CATEGORIES, Card
from talingchan.models.failure import FailureKind, KnownError


def _validate_category(category: str) -> None:
    if category not in FILTER_CATEGORIES:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message=f"Unknown filter category: {category}",
            detail=f"Valid categories: {list(FILTER_CATEGORIES)}",
            status_code=422,
        )


@dataclass(frozen=True)
class CardQuery:
    """Search text plus the selected values of each filter category."""

    text: str = ""
    filters: Mapping[str, frozenset[str]] = field(default_factory=dict)

    @classmethod
    def build(cls, text: str = "", filters: Mapping[str, Iterable[str]] | None = None) -> "CardQuery":
        """
        Build a query from loosely typed selections.

        Raises:
            KnownError: If a filter category does not exist
        """
        selected: dict[str, frozenset[str]] = {}
        for category, values in (filters or {}).items():
            _validate_category(category)
            selected[category] = frozenset(values)
        return cls(text=text, filters=selected)

    def toggle(self, category: str, value: str) -> "CardQuery":
        """Return a query with `value` selected if it was not, deselected if it was."""
        _validate_category(category)
        current = self.filters.get(category, frozenset())
        updated = current - {value} if value in current else current | {value}
        return CardQuery(text=self.text, filters={**self.filters, category: updated})

    def matches(self, card: Card) -> bool:
        if self.text:
            needle = self.text.lower()
            if needle not in card.name.lower() and needle not in card.rule_name.lower():
                return False

        for category, selected in self.filters.items():
            if not selected:
                continue
            if card.attribute(category) not in selected:
                return False

        return True


def search_cards(cards: Iterable[Card], query: CardQuery) -> list[Card]:
    """Cards matching the query, in catalog order."""
    return [card for card in cards if query.matches(card)]
