"""
Filter index.

Derives the values offered in each filter category from the catalog.
"""

import math
from collections.abc import Iterable

from talingchan.models.card import FILTER_CATEGORIES, NUMERIC_CATEGORIES, Card


def _is_number(value: str) -> bool:
    try:
        return math.isfinite(float(value))
    except ValueError:
        return False


def build_filter_index(cards: Iterable[Card]) -> dict[str, list[str]]:
    """
    Collect the distinct values of every filter category.

    Numeric categories (Cost, Gem) silently drop values that do not parse
    as numbers and are sorted by numeric value; the others are sorted as
    strings. Every category is present, possibly with an empty list.

    Args:
        cards: The card catalog

    Returns:
        {category: sorted distinct values}
    """
    values: dict[str, set[str]] = {category: set() for category in FILTER_CATEGORIES}

    for card in cards:
        for category in FILTER_CATEGORIES:
            value = card.attribute(category)
            if not value:
                continue
            if category in NUMERIC_CATEGORIES and not _is_number(value):
                continue
            values[category].add(value)

    index: dict[str, list[str]] = {}
    for category, found in values.items():
        if category in NUMERIC_CATEGORIES:
            index[category] = sorted(found, key=lambda v: (float(v), v))
        else:
            index[category] = sorted(found)
    return index
