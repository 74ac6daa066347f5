"""
Deck legality engine.

A DeckSession owns one player's main deck and life deck. Every add is
validated against DeckRules before state changes; a rejected add raises a
LegalityError subclass and leaves both decks exactly as they were.

Validation order for the main deck:
1. Life cards never enter the main deck
2. Exclusive-avatar guard, both directions
3. Deck full
4. Banned card, then per-card copy limit
5. Only#1 uniqueness
6. Restriction group exclusivity
"""

import logging
from collections.abc import Callable

from talingchan.models.card import Card
from talingchan.models.deck import DeckEntry, DeckSnapshot
from talingchan.models.failure import FailureKind, RefusalError
from talingchan.models.rules import DEFAULT_RULES, DeckRules
from talingchan.services.presentation import GroupedDeck, group_main_deck, sort_main_deck

logger = logging.getLogger(__name__)

SessionListener = Callable[["DeckSession"], None]


class LegalityError(RefusalError):
    """Base class for deck rule violations. State is never changed."""

    def __init__(self, kind: FailureKind, card: Card, message: str, suggestion: str | None = None):
        self.card = card
        super().__init__(
            kind=kind,
            message=message,
            detail=f"rule_name={card.rule_name}",
            suggestion=suggestion,
        )


class LifeCardInMainDeckError(LegalityError):
    def __init__(self, card: Card):
        super().__init__(
            FailureKind.LIFE_CARD_IN_MAIN_DECK,
            card,
            f"'{card.name}' is a Life card and can only go in the Life Deck.",
            suggestion="Add it to the Life Deck instead (right-click in the gallery).",
        )


class ExclusiveAvatarConflictError(LegalityError):
    def __init__(self, card: Card, rule_name: str, allowed_symbol: str):
        self.guarded_rule_name = rule_name
        self.allowed_symbol = allowed_symbol
        if card.rule_name == rule_name:
            message = (
                f"Cannot add '{card.name}': the deck already has an Avatar "
                f"whose Symbol is not '{allowed_symbol}'."
            )
        else:
            message = (
                f"A deck with '{rule_name}' may only add Avatars with Symbol "
                f"'{allowed_symbol}'; '{card.name}' has Symbol '{card.symbol or ''}'."
            )
        super().__init__(FailureKind.EXCLUSIVE_AVATAR_CONFLICT, card, message)


class MainDeckFullError(LegalityError):
    def __init__(self, card: Card, limit: int):
        self.limit = limit
        super().__init__(
            FailureKind.MAIN_DECK_FULL,
            card,
            f"Your Main Deck is full ({limit} cards).",
        )


class BannedCardError(LegalityError):
    def __init__(self, card: Card):
        super().__init__(
            FailureKind.BANNED_CARD,
            card,
            f"'{card.name}' is banned and cannot be put in a deck.",
        )


class CopyLimitError(LegalityError):
    def __init__(self, card: Card, limit: int):
        self.limit = limit
        super().__init__(
            FailureKind.COPY_LIMIT_EXCEEDED,
            card,
            f"Cannot add more '{card.name}': at most {limit} copies allowed.",
        )


class OnlyOneConflictError(LegalityError):
    def __init__(self, card: Card, existing: Card):
        self.existing = existing
        super().__init__(
            FailureKind.ONLY_ONE_CONFLICT,
            card,
            f"Only one Only#1 card is allowed per deck; '{existing.name}' is already in it.",
        )


class RestrictionGroupConflictError(LegalityError):
    def __init__(self, card: Card, existing: Card):
        self.existing = existing
        super().__init__(
            FailureKind.RESTRICTION_GROUP_CONFLICT,
            card,
            f"Cannot add '{card.name}': '{existing.name}' from group "
            f"({card.group_id}) is already in the deck.",
        )


class NotALifeCardError(LegalityError):
    def __init__(self, card: Card):
        super().__init__(
            FailureKind.NOT_A_LIFE_CARD,
            card,
            f"'{card.name}' is not a Life card and cannot be added to the Life Deck.",
        )


class LifeDeckFullError(LegalityError):
    def __init__(self, card: Card, limit: int):
        self.limit = limit
        super().__init__(
            FailureKind.LIFE_DECK_FULL,
            card,
            f"Your Life Deck is full ({limit} cards).",
        )


class LifeDeckDuplicateError(LegalityError):
    def __init__(self, card: Card):
        super().__init__(
            FailureKind.LIFE_DECK_DUPLICATE,
            card,
            f"'{card.name}' is already in the Life Deck (no duplicate names).",
        )


class ClearNotConfirmedError(RefusalError):
    """Raised when clear_all is called without confirmation."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.CONFIRMATION_REQUIRED,
            message="Clearing both decks needs confirmation.",
            suggestion="Repeat the request with confirm set to true.",
        )


class DeckSession:
    """
    One player's deck-in-progress.

    Not thread-safe: mutations must come from a single owner, which the
    service guarantees by never awaiting inside a mutation.
    """

    def __init__(
        self,
        rules: DeckRules = DEFAULT_RULES,
        deck_name: str = "",
        player_name: str = "",
    ) -> None:
        self.rules = rules
        self.deck_name = deck_name
        self.player_name = player_name
        self.main_deck: list[DeckEntry] = []
        self.life_deck: list[Card] = []
        self._listeners: list[SessionListener] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def main_deck_total(self) -> int:
        return sum(entry.count for entry in self.main_deck)

    def life_deck_total(self) -> int:
        return len(self.life_deck)

    def find_entry(self, rule_name: str) -> DeckEntry | None:
        for entry in self.main_deck:
            if entry.rule_name == rule_name:
                return entry
        return None

    def count_of(self, rule_name: str) -> int:
        """Copies of a rule name currently in the main deck."""
        entry = self.find_entry(rule_name)
        return entry.count if entry else 0

    def grouped(self) -> GroupedDeck:
        """Presentation buckets for the current main deck."""
        return group_main_deck(self.main_deck)

    def snapshot(self) -> DeckSnapshot:
        """Immutable copy of the current state."""
        return DeckSnapshot(
            deck_name=self.deck_name,
            player_name=self.player_name,
            main_deck=tuple(DeckEntry(entry.card, entry.count) for entry in self.main_deck),
            life_deck=tuple(self.life_deck),
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def check_main_deck(self, card: Card) -> None:
        """
        Validate adding one copy of a card to the main deck.

        Raises:
            LegalityError: The first rule the add would break
        """
        rules = self.rules

        if rules.is_life_card(card):
            raise LifeCardInMainDeckError(card)

        for guard in rules.exclusive_avatar_rules:
            if guard.is_guarded_card(card) and any(
                guard.is_disqualifying_avatar(entry.card) for entry in self.main_deck
            ):
                raise ExclusiveAvatarConflictError(card, guard.rule_name, guard.allowed_symbol)
            if guard.is_disqualifying_avatar(card) and any(
                guard.is_guarded_card(entry.card) for entry in self.main_deck
            ):
                raise ExclusiveAvatarConflictError(card, guard.rule_name, guard.allowed_symbol)

        if self.main_deck_total() >= rules.main_deck_limit:
            raise MainDeckFullError(card, rules.main_deck_limit)

        limit = rules.effective_limit(card)
        if limit == 0:
            raise BannedCardError(card)
        if self.count_of(card.rule_name) >= limit:
            raise CopyLimitError(card, limit)

        if card.is_only_one:
            existing_only_one = next(
                (entry.card for entry in self.main_deck if entry.card.is_only_one), None
            )
            if existing_only_one is not None:
                raise OnlyOneConflictError(card, existing_only_one)

        if rules.has_exclusive_restriction(card):
            conflict = next(
                (
                    entry.card
                    for entry in self.main_deck
                    if entry.card.group_id == card.group_id
                    and entry.rule_name != card.rule_name
                ),
                None,
            )
            if conflict is not None:
                raise RestrictionGroupConflictError(card, conflict)

    def check_life_deck(self, card: Card) -> None:
        """
        Validate adding a card to the life deck.

        Raises:
            LegalityError: The first rule the add would break
        """
        if not self.rules.is_life_card(card):
            raise NotALifeCardError(card)
        if len(self.life_deck) >= self.rules.life_deck_limit:
            raise LifeDeckFullError(card, self.rules.life_deck_limit)
        if any(member.rule_name == card.rule_name for member in self.life_deck):
            raise LifeDeckDuplicateError(card)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_to_main_deck(self, card: Card) -> DeckEntry:
        """
        Add one copy of a card to the main deck and re-sort.

        Returns:
            The entry for the card after the add

        Raises:
            LegalityError: If any deck rule forbids the add
        """
        try:
            self.check_main_deck(card)
        except LegalityError as e:
            logger.warning("Rejected main deck add of %s: %s", card.rule_name, e.kind.value)
            raise

        entry = self.find_entry(card.rule_name)
        if entry is not None:
            entry.count += 1
        else:
            entry = DeckEntry(card=card, count=1)
            self.main_deck.append(entry)
        self.main_deck = sort_main_deck(self.main_deck)

        self._notify()
        return entry

    def add_to_life_deck(self, card: Card) -> None:
        """
        Append a card to the life deck.

        Raises:
            LegalityError: If any life deck rule forbids the add
        """
        try:
            self.check_life_deck(card)
        except LegalityError as e:
            logger.warning("Rejected life deck add of %s: %s", card.rule_name, e.kind.value)
            raise

        self.life_deck.append(card)
        self._notify()

    def remove_from_main_deck(self, card: Card) -> bool:
        """
        Remove one copy of a card from the main deck.

        The entry is dropped when its last copy goes. Order is not
        recomputed. Returns False when the card was not in the deck.
        """
        entry = self.find_entry(card.rule_name)
        if entry is None:
            return False

        if entry.count > 1:
            entry.count -= 1
        else:
            self.main_deck.remove(entry)

        self._notify()
        return True

    def remove_from_life_deck(self, card: Card) -> bool:
        """Remove a card from the life deck. Returns False if it was absent."""
        remaining = [member for member in self.life_deck if member.rule_name != card.rule_name]
        if len(remaining) == len(self.life_deck):
            return False

        self.life_deck = remaining
        self._notify()
        return True

    def clear_all(self, confirm: bool) -> None:
        """
        Empty both decks.

        Raises:
            ClearNotConfirmedError: If the caller did not confirm
        """
        if not confirm:
            raise ClearNotConfirmedError()

        self.main_deck = []
        self.life_deck = []
        self._notify()

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Call `listener(session)` after every successful mutation.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
