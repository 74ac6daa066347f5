"""
Tournament decklist export.

Sends a complete deck to the card data service, which renders the
official tournament spreadsheet. Preconditions are checked locally so an
incomplete deck never produces a request.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any

import httpx

from talingchan.models.deck import DeckSnapshot
from talingchan.models.failure import FailureKind, KnownError
from talingchan.models.rules import DEFAULT_RULES, DeckRules

logger = logging.getLogger(__name__)

TOURNAMENT_EXPORT_PATH = "/api/generate-tournament-pdf"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_WHITESPACE = re.compile(r"\s+")


class ExportValidationError(KnownError):
    """Raised before any network call when the deck cannot be exported yet."""

    def __init__(self, message: str, missing: list[str]):
        self.missing = missing
        super().__init__(
            kind=FailureKind.EXPORT_PRECONDITION,
            message=message,
            detail="; ".join(missing),
            suggestion="Complete the deck and fill in the names, then export again.",
            status_code=422,
        )


class ExportError(KnownError):
    """Raised when the export service fails. No file is produced."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=message,
            detail=detail,
            suggestion="Try the export again in a moment.",
            status_code=502,
        )


@dataclass(frozen=True)
class ExportedFile:
    """A generated export artifact."""

    filename: str
    media_type: str
    content: bytes


def safe_filename_part(text: str, fallback: str) -> str:
    """Replace whitespace runs with underscores; use `fallback` when blank."""
    cleaned = _WHITESPACE.sub("_", text.strip())
    return cleaned or fallback


def validate_tournament_export(snapshot: DeckSnapshot, rules: DeckRules = DEFAULT_RULES) -> None:
    """
    Check tournament export preconditions.

    Raises:
        ExportValidationError: Listing every unmet precondition
    """
    missing: list[str] = []

    if not snapshot.deck_name.strip():
        missing.append("deck name is blank")
    if not snapshot.player_name.strip():
        missing.append("player name is blank")

    main_total = snapshot.main_deck_total()
    if main_total != rules.main_deck_limit:
        missing.append(f"main deck has {main_total}/{rules.main_deck_limit} cards")
    life_total = snapshot.life_deck_total()
    if life_total != rules.life_deck_limit:
        missing.append(f"life deck has {life_total}/{rules.life_deck_limit} cards")

    if missing:
        names_missing = any("name" in reason for reason in missing)
        message = (
            "Enter a deck name and a player name before exporting."
            if names_missing
            else (
                f"Deck is incomplete: the Main Deck needs {rules.main_deck_limit} cards "
                f"and the Life Deck needs {rules.life_deck_limit} cards."
            )
        )
        raise ExportValidationError(message, missing)


def build_tournament_payload(snapshot: DeckSnapshot) -> dict[str, Any]:
    """Request body for the tournament export endpoint."""
    return {
        "deckName": snapshot.deck_name,
        "playerName": snapshot.player_name,
        "mainDeck": [entry.to_payload() for entry in snapshot.main_deck],
        "lifeDeck": [card.to_payload() for card in snapshot.life_deck],
    }


def tournament_filename(player_name: str) -> str:
    return f"decklist_{safe_filename_part(player_name, 'player')}.xlsx"


async def export_tournament_sheet(
    snapshot: DeckSnapshot,
    api_url: str,
    client: httpx.AsyncClient | None = None,
    rules: DeckRules = DEFAULT_RULES,
    timeout: float = 30.0,
) -> ExportedFile:
    """
    Generate the tournament spreadsheet for a deck snapshot.

    Args:
        snapshot: Deck state captured when the export was requested
        api_url: Base URL of the card data service
        client: Optional client for connection reuse
        rules: Deck size requirements
        timeout: Request timeout in seconds when no client is given

    Raises:
        ExportValidationError: If the deck is incomplete (no request is sent)
        ExportError: If the service call fails
    """
    validate_tournament_export(snapshot, rules)

    url = f"{api_url.rstrip('/')}{TOURNAMENT_EXPORT_PATH}"
    payload = build_tournament_payload(snapshot)

    try:
        if client is not None:
            response = await client.post(url, json=payload)
        else:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                response = await own_client.post(url, json=payload)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error("Tournament export failed: HTTP %s", e.response.status_code)
        raise ExportError(
            "Could not export the tournament spreadsheet.",
            detail=f"HTTP {e.response.status_code}",
        ) from e
    except httpx.RequestError as e:
        logger.error("Tournament export failed: %s", e)
        raise ExportError("Could not export the tournament spreadsheet.", detail=str(e)) from e

    filename = tournament_filename(snapshot.player_name)
    logger.info("Exported tournament sheet %s (%d bytes)", filename, len(response.content))
    return ExportedFile(filename=filename, media_type=XLSX_MEDIA_TYPE, content=response.content)
