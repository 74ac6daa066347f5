"""
Deck presentation.

Groups and orders main deck entries for display and export. Everything
here is a pure projection of the main deck; nothing is cached.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from talingchan.models.deck import DeckEntry
from talingchan.models.rules import AVATAR_TYPE, CONSTRUCT_TYPE, MAGIC_TYPE

ONLY_ONE_GROUP = "Only#1"
OTHER_GROUP = "Other"

# Fixed display order; "Other" is kept apart and always comes last
GROUP_ORDER: tuple[str, ...] = (ONLY_ONE_GROUP, AVATAR_TYPE, MAGIC_TYPE, CONSTRUCT_TYPE)


@dataclass
class DeckGroup:
    """A display bucket of main deck entries."""

    name: str
    entries: list[DeckEntry] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Physical cards in this group."""
        return sum(entry.count for entry in self.entries)

    def header(self) -> str:
        return f"{self.name} ({self.total})"


def group_name_for(entry: DeckEntry) -> str:
    """Bucket an entry belongs to. Only#1 wins over the card's type."""
    if entry.card.is_only_one:
        return ONLY_ONE_GROUP
    if entry.card.type in GROUP_ORDER:
        return entry.card.type
    return OTHER_GROUP


def category_rank(entry: DeckEntry) -> int:
    """Position of the entry's bucket in GROUP_ORDER; unknown types sort last."""
    group = group_name_for(entry)
    if group == OTHER_GROUP:
        return len(GROUP_ORDER)
    return GROUP_ORDER.index(group)


def sort_main_deck(entries: Iterable[DeckEntry]) -> list[DeckEntry]:
    """
    Order entries by category precedence, then by display name.

    Name comparison is case-sensitive code point order. The sort is
    stable, so entries with equal names keep their relative order.
    """
    return sorted(entries, key=lambda entry: (category_rank(entry), entry.card.name))


@dataclass
class GroupedDeck:
    """Main deck split into named buckets."""

    groups: dict[str, DeckGroup]

    def __getitem__(self, name: str) -> DeckGroup:
        return self.groups.get(name) or DeckGroup(name=name)

    def ordered_groups(self) -> Iterator[DeckGroup]:
        """Non-empty groups in display order."""
        for name in GROUP_ORDER:
            group = self.groups.get(name)
            if group and group.entries:
                yield group


def group_main_deck(entries: Iterable[DeckEntry]) -> GroupedDeck:
    """Group main deck entries, keeping their deck order inside each group."""
    groups: dict[str, DeckGroup] = {}
    for entry in entries:
        name = group_name_for(entry)
        groups.setdefault(name, DeckGroup(name=name)).entries.append(entry)
    return GroupedDeck(groups=groups)
