"""
Card catalog.

Fetches the card list once from the card data service and holds it,
immutable, for the rest of the process.
"""

import logging
from typing import Any

import httpx

from talingchan.models.card import Card
from talingchan.models.failure import FailureKind, KnownError

logger = logging.getLogger(__name__)

CARDS_PATH = "/api/cards"


class CatalogError(KnownError):
    """Raised when the card catalog cannot be fetched or parsed."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.SERVICE_UNAVAILABLE,
            message=message,
            detail=detail,
            suggestion="Check that the card data service is running.",
            status_code=503,
        )


def parse_catalog(payload: Any) -> tuple[Card, ...]:
    """
    Parse a `{"data": [...]}` catalog payload.

    Records that cannot become a card (not an object, no Name or RuleName)
    are logged and skipped; the rest of the catalog is kept.

    Raises:
        CatalogError: If the payload has no `data` list
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
        raise CatalogError("Card catalog payload has no 'data' list")

    cards: list[Card] = []
    skipped = 0
    for record in payload["data"]:
        if not isinstance(record, dict):
            logger.warning("Skipping non-object catalog record: %r", record)
            skipped += 1
            continue
        try:
            cards.append(Card.from_payload(record))
        except ValueError as e:
            logger.warning("Skipping invalid catalog record: %s", e)
            skipped += 1

    if skipped:
        logger.warning("Skipped %d of %d catalog records", skipped, len(payload["data"]))
    return tuple(cards)


async def fetch_catalog(
    api_url: str,
    client: httpx.AsyncClient | None = None,
    timeout: float = 30.0,
) -> tuple[Card, ...]:
    """
    Fetch and parse the card catalog.

    Args:
        api_url: Base URL of the card data service
        client: Optional client for connection reuse
        timeout: Request timeout in seconds when no client is given

    Raises:
        CatalogError: If the request fails or the payload is malformed
    """
    url = f"{api_url.rstrip('/')}{CARDS_PATH}"

    try:
        if client is not None:
            response = await client.get(url)
        else:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                response = await own_client.get(url)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as e:
        raise CatalogError(
            f"Failed to fetch card catalog: HTTP {e.response.status_code}", detail=url
        ) from e
    except httpx.RequestError as e:
        raise CatalogError(f"Failed to fetch card catalog: {e}", detail=url) from e
    except ValueError as e:
        raise CatalogError("Card catalog response is not valid JSON", detail=url) from e

    return parse_catalog(payload)


class CardCatalog:
    """
    The session's card list.

    `loaded` is False until `load()` finishes. A failed load is logged and
    leaves an empty catalog that reports itself as loaded; there is no retry.
    """

    def __init__(self, cards: tuple[Card, ...] = (), loaded: bool = False) -> None:
        self._cards = cards
        self._by_rule_name = {card.rule_name: card for card in cards}
        self.loaded = loaded
        self.error: CatalogError | None = None

    @property
    def cards(self) -> tuple[Card, ...]:
        return self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def get(self, rule_name: str) -> Card | None:
        return self._by_rule_name.get(rule_name)

    def require(self, rule_name: str) -> Card:
        """
        Look up a card by rule name.

        Raises:
            KnownError: If no card has this rule name
        """
        card = self.get(rule_name)
        if card is None:
            raise KnownError(
                kind=FailureKind.NOT_FOUND,
                message=f"Card '{rule_name}' is not in the catalog",
                status_code=404,
            )
        return card

    async def load(
        self,
        api_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Fetch the catalog once, degrading to empty on failure."""
        if self.loaded:
            return

        try:
            cards = await fetch_catalog(api_url, client=client, timeout=timeout)
        except CatalogError as e:
            logger.error("Error fetching card data: %s", e)
            self.error = e
            cards = ()
        else:
            logger.info("Loaded %d cards from %s", len(cards), api_url)

        self._cards = cards
        self._by_rule_name = {card.rule_name: card for card in cards}
        self.loaded = True
