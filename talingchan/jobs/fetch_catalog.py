"""
Fetch the card catalog and report what the filters would offer.

Useful for checking a card data service before pointing the deck
builder at it.
"""

import asyncio
import logging

from talingchan.config import settings
from talingchan.services.catalog import fetch_catalog
from talingchan.services.filter_index import build_filter_index

logger = logging.getLogger(__name__)


async def run_fetch(api_url: str | None = None) -> dict[str, list[str]]:
    """
    Fetch the catalog and build its filter index.

    Returns:
        The filter index of the fetched catalog
    """
    api_url = api_url or settings.api_url
    logger.info("Fetching card catalog from %s...", api_url)

    try:
        cards = await fetch_catalog(api_url, timeout=settings.request_timeout)
    except Exception as e:
        logger.error("Failed to fetch card catalog: %s", e)
        raise

    index = build_filter_index(cards)
    logger.info("Fetched %d cards", len(cards))
    for category, values in index.items():
        logger.info("%s: %d values", category, len(values))
    return index


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_fetch())


if __name__ == "__main__":
    main()
