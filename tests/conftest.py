from collections.abc import Callable
from typing import Any

import pytest

from talingchan.models.card import Card


@pytest.fixture
def make_card() -> Callable[..., Card]:
    """Factory for cards; rule_name defaults to the display name."""

    def _make(name: str, **fields: Any) -> Card:
        fields.setdefault("rule_name", name)
        fields.setdefault("type", "Magic")
        return Card(name=name, **fields)

    return _make


@pytest.fixture
def catalog_payload() -> dict[str, Any]:
    """Sample /api/cards response in the card data service's own format."""
    return {
        "data": [
            {
                "Name": "Garuda",
                "RuleName": "Garuda",
                "Type": "Avatar",
                "Symbol": "เทพ",
                "Cost": "3",
                "C Color": "Red",
                "Gem": "1",
                "G Color": "Red",
                "is_only_one": False,
                "AllowedCopies": "",
                "image_url": "https://cards.example/garuda.png",
            },
            {
                "Name": "Naga",
                "RuleName": "Naga",
                "Type": "Avatar",
                "Symbol": "Naga",
                "Cost": 2,
                "C Color": "Blue",
                "Gem": "",
                "G Color": "",
                "is_only_one": False,
                "AllowedCopies": "2",
            },
            {
                "Name": "Fireball",
                "RuleName": "Fireball",
                "Type": "Magic",
                "Symbol": "",
                "Cost": "10",
                "C Color": "Red",
                "Gem": "x",
                "G Color": " Red ",
                "AllowedCopies": "0",
            },
            {
                "Name": "Fortress_Life",
                "RuleName": "Fortress_Life",
                "Type": "",
                "Cost": "N/A",
                "AllowedCopies": None,
            },
        ]
    }
