"""
Tests for the tournament spreadsheet export.

Incomplete decks must be rejected before any network call is made.
"""

import json

import httpx
import pytest
import respx

from talingchan.models.card import Card
from talingchan.models.deck import DeckEntry, DeckSnapshot
from talingchan.models.failure import FailureKind
from talingchan.services.tournament_export import (
    XLSX_MEDIA_TYPE,
    ExportError,
    ExportValidationError,
    build_tournament_payload,
    export_tournament_sheet,
    tournament_filename,
    validate_tournament_export,
)

API_URL = "http://cards.test"
EXPORT_URL = f"{API_URL}/api/generate-tournament-pdf"


def _snapshot(main_total: int = 50, life_total: int = 5, **names: str) -> DeckSnapshot:
    entries: list[DeckEntry] = []
    remaining = main_total
    index = 0
    while remaining > 0:
        count = min(4, remaining)
        entries.append(DeckEntry(Card(name=f"Card {index}", rule_name=f"Card {index}"), count))
        remaining -= count
        index += 1
    life = tuple(Card(name=f"L{i}_Life", rule_name=f"L{i}_Life") for i in range(life_total))
    return DeckSnapshot(
        deck_name=names.get("deck_name", "Burn"),
        player_name=names.get("player_name", "Somchai Jaidee"),
        main_deck=tuple(entries),
        life_deck=life,
    )


class TestValidateTournamentExport:
    def test_complete_deck_passes(self) -> None:
        validate_tournament_export(_snapshot())

    def test_incomplete_main_deck(self) -> None:
        with pytest.raises(ExportValidationError) as exc_info:
            validate_tournament_export(_snapshot(main_total=49))

        assert exc_info.value.kind == FailureKind.EXPORT_PRECONDITION
        assert exc_info.value.missing == ["main deck has 49/50 cards"]

    def test_incomplete_life_deck(self) -> None:
        with pytest.raises(ExportValidationError) as exc_info:
            validate_tournament_export(_snapshot(life_total=4))
        assert exc_info.value.missing == ["life deck has 4/5 cards"]

    def test_blank_names(self) -> None:
        with pytest.raises(ExportValidationError) as exc_info:
            validate_tournament_export(_snapshot(deck_name="  ", player_name=""))

        assert "deck name is blank" in exc_info.value.missing
        assert "player name is blank" in exc_info.value.missing
        assert "name" in exc_info.value.message


class TestBuildPayload:
    def test_payload_shape(self) -> None:
        payload = build_tournament_payload(_snapshot())

        assert payload["deckName"] == "Burn"
        assert payload["playerName"] == "Somchai Jaidee"
        assert sum(item["count"] for item in payload["mainDeck"]) == 50
        assert len(payload["lifeDeck"]) == 5
        assert payload["mainDeck"][0]["RuleName"] == "Card 0"

    def test_filename(self) -> None:
        assert tournament_filename("Somchai  Jaidee") == "decklist_Somchai_Jaidee.xlsx"
        assert tournament_filename("  ") == "decklist_player.xlsx"


class TestExportTournamentSheet:
    @respx.mock(assert_all_called=False)
    async def test_incomplete_deck_sends_no_request(self) -> None:
        """A 49-card main deck is rejected before any network call."""
        route = respx.post(EXPORT_URL).mock(return_value=httpx.Response(200, content=b"xlsx"))

        with pytest.raises(ExportValidationError):
            await export_tournament_sheet(_snapshot(main_total=49), API_URL)

        assert not route.called

    @respx.mock
    async def test_returns_spreadsheet(self) -> None:
        route = respx.post(EXPORT_URL).mock(
            return_value=httpx.Response(200, content=b"PK\x03\x04sheet")
        )

        exported = await export_tournament_sheet(_snapshot(), API_URL)

        assert exported.content == b"PK\x03\x04sheet"
        assert exported.media_type == XLSX_MEDIA_TYPE
        assert exported.filename == "decklist_Somchai_Jaidee.xlsx"
        sent = json.loads(route.calls.last.request.content)
        assert sent["deckName"] == "Burn"
        assert len(sent["lifeDeck"]) == 5

    @respx.mock
    async def test_server_error_wrapped(self) -> None:
        respx.post(EXPORT_URL).mock(return_value=httpx.Response(500))

        with pytest.raises(ExportError) as exc_info:
            await export_tournament_sheet(_snapshot(), API_URL)

        assert exc_info.value.kind == FailureKind.EXTERNAL_API_ERROR
        assert exc_info.value.status_code == 502

    @respx.mock
    async def test_network_error_wrapped(self) -> None:
        respx.post(EXPORT_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(ExportError):
            await export_tournament_sheet(_snapshot(), API_URL)
