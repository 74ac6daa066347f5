from dataclasses import dataclass, field
from typing import Any

from talingchan.models.card import Card


@dataclass(slots=True)
class DeckEntry:
    """
    A main deck line: one rule name and how many copies are in the deck.

    Attributes:
        card: The card this line stands for
        count: Copies in the deck, always >= 1 while the entry exists
    """

    card: Card
    count: int = 1

    @property
    def rule_name(self) -> str:
        return self.card.rule_name

    def to_payload(self) -> dict[str, Any]:
        """Card payload with its count, as the tournament service expects it."""
        return {**self.card.to_payload(), "count": self.count}


@dataclass(frozen=True)
class DeckSnapshot:
    """
    An immutable copy of a deck session's state at one moment.

    Exports read from a snapshot so edits made while an export is in
    flight cannot leak into the produced artifact.
    """

    deck_name: str = ""
    player_name: str = ""
    main_deck: tuple[DeckEntry, ...] = field(default_factory=tuple)
    life_deck: tuple[Card, ...] = field(default_factory=tuple)

    def main_deck_total(self) -> int:
        """Physical cards in the main deck."""
        return sum(entry.count for entry in self.main_deck)

    def life_deck_total(self) -> int:
        return len(self.life_deck)
