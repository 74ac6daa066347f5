"""Tests for deck session and export API endpoints."""

from pathlib import Path
from unittest.mock import patch
from urllib.parse import quote

import httpx
import pytest
import respx
from httpx import ASGITransport, AsyncClient
from PIL import ImageFont

from talingchan.api.dependencies import get_catalog, get_settings, get_store
from talingchan.api.exports import content_disposition
from talingchan.config import Settings
from talingchan.main import app
from talingchan.models.card import Card
from talingchan.models.rules import MEAR_PRA_ISUAN_RULE_NAME, THEP_SYMBOL
from talingchan.services.catalog import CardCatalog
from talingchan.services.session_store import SessionStore

API_URL = "http://cards.test"


@pytest.fixture
def catalog() -> CardCatalog:
    cards = [
        Card(name="Garuda", rule_name="Garuda", type="Avatar", symbol=THEP_SYMBOL),
        Card(name="Naga", rule_name="Naga", type="Avatar", symbol="Naga"),
        Card(name="Fireball", rule_name="Fireball", type="Magic"),
        Card(name="Forbidden", rule_name="Forbidden", type="Magic", allowed_copies=0),
        Card(name="Queen", rule_name=MEAR_PRA_ISUAN_RULE_NAME, type="Avatar", symbol=THEP_SYMBOL),
        Card(name="Crown", rule_name="Crown", type="Construct", is_only_one=True),
    ]
    cards += [Card(name=f"Filler {i:02d}", rule_name=f"Filler {i:02d}") for i in range(12)]
    cards += [Card(name=f"Tower{i}_Life", rule_name=f"Tower{i}_Life") for i in range(6)]
    return CardCatalog(tuple(cards), loaded=True)


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
async def client(catalog: CardCatalog, store: SessionStore):
    """Provide an async test client with injected catalog, store and settings."""
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: Settings(api_url=API_URL)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def _new_session(client: AsyncClient, **body: str) -> str:
    response = await client.post("/sessions", json=body)
    assert response.status_code == 201
    return response.json()["session_id"]


async def _build_complete_deck(client: AsyncClient, session_id: str) -> None:
    for index in range(12):
        for _ in range(4):
            await client.post(f"/sessions/{session_id}/main", json={"rule_name": f"Filler {index:02d}"})
    for _ in range(2):
        await client.post(f"/sessions/{session_id}/main", json={"rule_name": "Fireball"})
    for index in range(5):
        await client.post(f"/sessions/{session_id}/life", json={"rule_name": f"Tower{index}_Life"})


class TestSessionLifecycle:
    async def test_create_session(self, client: AsyncClient) -> None:
        response = await client.post("/sessions", json={"deck_name": "Burn"})

        assert response.status_code == 201
        data = response.json()
        assert data["deck_name"] == "Burn"
        assert data["main_deck_total"] == 0
        assert data["main_deck_limit"] == 50
        assert data["life_deck_limit"] == 5

    async def test_create_session_without_body(self, client: AsyncClient) -> None:
        response = await client.post("/sessions")
        assert response.status_code == 201

    async def test_unknown_session_is_404(self, client: AsyncClient) -> None:
        response = await client.get("/sessions/nope")

        assert response.status_code == 404
        data = response.json()
        assert data["outcome"] == "known_failure"
        assert data["failure"]["kind"] == "not_found"

    async def test_update_names(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)

        response = await client.patch(
            f"/sessions/{session_id}", json={"deck_name": "Tempo", "player_name": "Nok"}
        )

        data = response.json()
        assert data["deck_name"] == "Tempo"
        assert data["player_name"] == "Nok"

    async def test_delete_session(self, client: AsyncClient, store: SessionStore) -> None:
        session_id = await _new_session(client)

        response = await client.delete(f"/sessions/{session_id}")

        assert response.status_code == 204
        assert len(store) == 0


class TestMainDeckEndpoints:
    async def test_add_and_group(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)

        await client.post(f"/sessions/{session_id}/main", json={"rule_name": "Fireball"})
        response = await client.post(f"/sessions/{session_id}/main", json={"rule_name": "Garuda"})

        data = response.json()
        assert data["main_deck_total"] == 2
        assert [entry["card"]["rule_name"] for entry in data["main_deck"]] == ["Garuda", "Fireball"]
        assert [group["name"] for group in data["groups"]] == ["Avatar", "Magic"]
        assert data["other"] is None

    async def test_banned_card_refused(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)

        response = await client.post(
            f"/sessions/{session_id}/main", json={"rule_name": "Forbidden"}
        )

        assert response.status_code == 409
        data = response.json()
        assert data["outcome"] == "refusal"
        assert data["failure"]["kind"] == "banned_card"
        assert "banned" in data["failure"]["message"]

    async def test_life_card_refused_in_main(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)

        response = await client.post(
            f"/sessions/{session_id}/main", json={"rule_name": "Tower0_Life"}
        )

        assert response.status_code == 409
        assert response.json()["failure"]["kind"] == "life_card_in_main_deck"

    async def test_exclusive_avatar_refused(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)
        await client.post(
            f"/sessions/{session_id}/main", json={"rule_name": MEAR_PRA_ISUAN_RULE_NAME}
        )

        response = await client.post(f"/sessions/{session_id}/main", json={"rule_name": "Naga"})

        assert response.status_code == 409
        assert response.json()["failure"]["kind"] == "exclusive_avatar_conflict"

    async def test_unknown_card_is_404(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)

        response = await client.post(f"/sessions/{session_id}/main", json={"rule_name": "Ghost"})

        assert response.status_code == 404

    async def test_remove_one_copy(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)
        await client.post(f"/sessions/{session_id}/main", json={"rule_name": "Fireball"})
        await client.post(f"/sessions/{session_id}/main", json={"rule_name": "Fireball"})

        response = await client.delete(f"/sessions/{session_id}/main/Fireball")

        assert response.json()["main_deck"][0]["count"] == 1

    async def test_remove_absent_is_noop(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)

        response = await client.delete(f"/sessions/{session_id}/main/Fireball")

        assert response.status_code == 200
        assert response.json()["main_deck"] == []


class TestLifeDeckEndpoints:
    async def test_add_and_remove(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)

        response = await client.post(
            f"/sessions/{session_id}/life", json={"rule_name": "Tower0_Life"}
        )
        assert response.json()["life_deck_total"] == 1

        response = await client.delete(f"/sessions/{session_id}/life/Tower0_Life")
        assert response.json()["life_deck_total"] == 0

    async def test_non_life_card_refused(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)

        response = await client.post(f"/sessions/{session_id}/life", json={"rule_name": "Garuda"})

        assert response.status_code == 409
        assert response.json()["failure"]["kind"] == "not_a_life_card"

    async def test_full_life_deck_refused(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)
        for index in range(5):
            await client.post(
                f"/sessions/{session_id}/life", json={"rule_name": f"Tower{index}_Life"}
            )

        response = await client.post(
            f"/sessions/{session_id}/life", json={"rule_name": "Tower5_Life"}
        )

        assert response.json()["failure"]["kind"] == "life_deck_full"


class TestClear:
    async def test_clear_requires_confirm(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)
        await client.post(f"/sessions/{session_id}/main", json={"rule_name": "Fireball"})

        response = await client.post(f"/sessions/{session_id}/clear", json={"confirm": False})

        assert response.status_code == 409
        assert response.json()["failure"]["kind"] == "confirmation_required"
        state = await client.get(f"/sessions/{session_id}")
        assert state.json()["main_deck_total"] == 1

    async def test_confirmed_clear(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)
        await client.post(f"/sessions/{session_id}/main", json={"rule_name": "Fireball"})
        await client.post(f"/sessions/{session_id}/life", json={"rule_name": "Tower0_Life"})

        response = await client.post(f"/sessions/{session_id}/clear", json={"confirm": True})

        data = response.json()
        assert data["main_deck_total"] == 0
        assert data["life_deck_total"] == 0


class TestExports:
    @respx.mock(assert_all_called=False)
    async def test_tournament_export_incomplete(self, client: AsyncClient) -> None:
        route = respx.post(f"{API_URL}/api/generate-tournament-pdf").mock(
            return_value=httpx.Response(200, content=b"sheet")
        )
        session_id = await _new_session(client, deck_name="Burn", player_name="Nok")

        response = await client.post(f"/sessions/{session_id}/export/tournament")

        assert response.status_code == 422
        assert response.json()["failure"]["kind"] == "export_precondition"
        assert not route.called

    @respx.mock
    async def test_tournament_export_complete(self, client: AsyncClient) -> None:
        respx.post(f"{API_URL}/api/generate-tournament-pdf").mock(
            return_value=httpx.Response(200, content=b"PK-sheet")
        )
        session_id = await _new_session(client, deck_name="Burn", player_name="Nok Noi")
        await _build_complete_deck(client, session_id)

        response = await client.post(f"/sessions/{session_id}/export/tournament")

        assert response.status_code == 200
        assert response.content == b"PK-sheet"
        assert "decklist_Nok_Noi.xlsx" in response.headers["content-disposition"]

    @respx.mock
    async def test_tournament_export_upstream_failure(self, client: AsyncClient) -> None:
        respx.post(f"{API_URL}/api/generate-tournament-pdf").mock(
            return_value=httpx.Response(500)
        )
        session_id = await _new_session(client, deck_name="Burn", player_name="Nok")
        await _build_complete_deck(client, session_id)

        response = await client.post(f"/sessions/{session_id}/export/tournament")

        assert response.status_code == 502
        assert response.json()["failure"]["kind"] == "external_api_error"
        state = await client.get(f"/sessions/{session_id}")
        assert state.json()["main_deck_total"] == 50

    async def test_image_export(self, client: AsyncClient) -> None:
        session_id = await _new_session(client, deck_name="Red Rush")
        await client.post(f"/sessions/{session_id}/main", json={"rule_name": "Fireball"})

        response = await client.post(f"/sessions/{session_id}/export/image")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")

    async def test_image_export_needs_deck_name(self, client: AsyncClient) -> None:
        session_id = await _new_session(client)

        response = await client.post(f"/sessions/{session_id}/export/image")

        assert response.status_code == 422

    @respx.mock
    async def test_tournament_export_thai_player_name(self, client: AsyncClient) -> None:
        respx.post(f"{API_URL}/api/generate-tournament-pdf").mock(
            return_value=httpx.Response(200, content=b"PK-sheet")
        )
        session_id = await _new_session(client, deck_name="เด็คไฟ", player_name="สมชาย")
        await _build_complete_deck(client, session_id)

        response = await client.post(f"/sessions/{session_id}/export/tournament")

        assert response.status_code == 200
        assert response.content == b"PK-sheet"
        header = response.headers["content-disposition"]
        assert f"filename*=UTF-8''{quote('decklist_สมชาย.xlsx', safe='')}" in header
        assert 'filename="decklist______.xlsx"' in header

    async def test_image_export_thai_deck_name(self, client: AsyncClient) -> None:
        session_id = await _new_session(client, deck_name="เด็คไฟ")
        await client.post(f"/sessions/{session_id}/main", json={"rule_name": "Fireball"})

        response = await client.post(f"/sessions/{session_id}/export/image")

        assert response.status_code == 200
        assert response.content.startswith(b"\x89PNG")
        header = response.headers["content-disposition"]
        assert f"filename*=UTF-8''{quote('decklist-เด็คไฟ.png', safe='')}" in header

    async def test_image_export_uses_configured_font(
        self, client: AsyncClient, tmp_path: Path
    ) -> None:
        font_file = tmp_path / "NotoSansThai-Regular.ttf"
        font_file.write_bytes(b"font")
        app.dependency_overrides[get_settings] = lambda: Settings(
            api_url=API_URL, font_path=font_file
        )
        session_id = await _new_session(client, deck_name="Burn")

        with patch(
            "talingchan.services.image_export.ImageFont.truetype",
            return_value=ImageFont.load_default(),
        ) as truetype:
            response = await client.post(f"/sessions/{session_id}/export/image")

        assert response.status_code == 200
        assert truetype.call_args_list[0].args[0] == str(font_file)


class TestContentDisposition:
    def test_ascii_filename(self) -> None:
        header = content_disposition("decklist-Burn.png")

        assert header == (
            "attachment; filename=\"decklist-Burn.png\"; filename*=UTF-8''decklist-Burn.png"
        )

    def test_header_is_latin1_safe(self) -> None:
        header = content_disposition('decklist_สมชาย"x.xlsx')

        header.encode("latin-1")
        assert 'filename="decklist_______x.xlsx"' in header
