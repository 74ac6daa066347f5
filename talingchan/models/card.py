import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

# Payload key for each filterable attribute, in filter panel order
FILTER_CATEGORIES: dict[str, str] = {
    "Type": "type",
    "Symbol": "symbol",
    "Cost": "cost",
    "C Color": "c_color",
    "Gem": "gem",
    "G Color": "g_color",
}

NUMERIC_CATEGORIES = frozenset({"Cost", "Gem"})

_TRUTHY = frozenset({"true", "1", "yes", "y"})


@dataclass(frozen=True, slots=True)
class Card:
    """
    A card record from the catalog.

    Attributes:
        name: Display name (not guaranteed unique)
        rule_name: Identity key used for every deck rule
        type: Avatar, Magic, Construct, or None when unset
        symbol: Faction symbol
        cost: Cost as a trimmed string (numeric in well-formed data)
        c_color: Cost color
        gem: Gem value as a trimmed string
        g_color: Gem color
        is_only_one: Only#1 flag, at most one such card per main deck
        allowed_copies: Copy limit override; None means default, 0 means banned
        restriction_type_group_id: Restriction kind, e.g. "Choice" or "Incompatible"
        group_id: Restriction group the card belongs to
        image_url: Card image, carried through to exports
    """

    name: str
    rule_name: str
    type: str | None = None
    symbol: str | None = None
    cost: str | None = None
    c_color: str | None = None
    gem: str | None = None
    g_color: str | None = None
    is_only_one: bool = False
    allowed_copies: int | None = None
    restriction_type_group_id: str | None = None
    group_id: str | None = None
    image_url: str | None = None

    def attribute(self, category: str) -> str | None:
        """Trimmed string value of a filter category ("Type", "C Color", ...)."""
        return getattr(self, FILTER_CATEGORIES[category])

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Card":
        """
        Build a Card from a catalog record.

        Raises:
            ValueError: If Name or RuleName is missing
        """
        name = _clean_text(payload.get("Name"))
        rule_name = _clean_text(payload.get("RuleName"))
        if not name or not rule_name:
            raise ValueError(f"Card record missing Name or RuleName: {dict(payload)!r}")

        return cls(
            name=name,
            rule_name=rule_name,
            type=_clean_text(payload.get("Type")),
            symbol=_clean_text(payload.get("Symbol")),
            cost=_clean_text(payload.get("Cost")),
            c_color=_clean_text(payload.get("C Color")),
            gem=_clean_text(payload.get("Gem")),
            g_color=_clean_text(payload.get("G Color")),
            is_only_one=_as_flag(payload.get("is_only_one")),
            allowed_copies=_allowed_copies(payload.get("AllowedCopies"), rule_name),
            restriction_type_group_id=_clean_text(payload.get("RestrictionTypeGroupID")),
            group_id=_clean_text(payload.get("GroupID")),
            image_url=_clean_text(payload.get("image_url")),
        )

    def to_payload(self) -> dict[str, Any]:
        """Card record in the catalog's own key spelling."""
        return {
            "Name": self.name,
            "RuleName": self.rule_name,
            "Type": self.type,
            "Symbol": self.symbol,
            "Cost": self.cost,
            "C Color": self.c_color,
            "Gem": self.gem,
            "G Color": self.g_color,
            "is_only_one": self.is_only_one,
            "AllowedCopies": self.allowed_copies,
            "RestrictionTypeGroupID": self.restriction_type_group_id,
            "GroupID": self.group_id,
            "image_url": self.image_url,
        }


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def _as_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return False


def _allowed_copies(value: Any, rule_name: str) -> int | None:
    """Copy limit override; unparseable values fall back to the default limit."""
    # Empty string is the catalog's "no override" sentinel
    if value is None or value == "":
        return None
    number = math.nan
    if not isinstance(value, bool):
        try:
            number = float(value)
        except (TypeError, ValueError):
            pass
    if not math.isfinite(number):
        logger.warning("Ignoring non-numeric AllowedCopies %r for '%s'", value, rule_name)
        return None
    return int(number)
