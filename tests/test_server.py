"""
Rotas HTTP (Supabase e scraper mockados)
"""
import json
from unittest.mock import AsyncMock, MagicMock

from app.dependencies import get_bdo_client
from app.server import app
from scraper.client import BDOClient
from scraper.exceptions import ScrapeError
from scraper.models import GuildScrapeResult, PlayerLink, ScrapedProfile, ScrapeMode


def undecodable_response():
    """Contexto de `session.get` cuja página tem bytes inválidos para utf-8"""
    response = MagicMock()
    response.raise_for_status = MagicMock()
    response.text = AsyncMock(side_effect=UnicodeDecodeError("utf-8", b"\xff300", 0, 1, "invalid start byte"))

    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


# =============================================================================
# Scrape de perfil
# =============================================================================

class TestScrapePlayerRoute:
    """GET /api/chernobyl-scrape/player"""

    def test_missing_url(self, client):
        response = client.get("/api/chernobyl-scrape/player")
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "url obrigatório"}

    def test_success(self, client, mock_scraper):
        mock_scraper.scrape_profile.return_value = ScrapedProfile(
            name="Kaiser", source_url="https://x/p", max_power=9999, is_private=False
        )

        response = client.get("/api/chernobyl-scrape/player", params={"url": "https://x/p", "nome": "Kaiser"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {"nome": "Kaiser", "url": "https://x/p", "papd_maximo": 9999, "perfil_privado": False},
        }
        mock_scraper.scrape_profile.assert_awaited_once_with("https://x/p", "Kaiser")

    def test_null_power_kept(self, client, mock_scraper):
        mock_scraper.scrape_profile.return_value = ScrapedProfile(source_url="https://x/p")

        response = client.get("/api/chernobyl-scrape/player", params={"url": "https://x/p"})

        assert response.json()["data"]["papd_maximo"] is None

    def test_scrape_error(self, client, mock_scraper):
        mock_scraper.scrape_profile.side_effect = ScrapeError("Cannot connect to host")

        response = client.get("/api/chernobyl-scrape/player", params={"url": "https://x/p"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Cannot connect to host"}

    def test_undecodable_page(self, client):
        scraper = BDOClient(base_url="https://x")
        scraper._session = MagicMock()
        scraper._session.get = MagicMock(return_value=undecodable_response())
        app.dependency_overrides[get_bdo_client] = lambda: scraper

        response = client.get("/api/chernobyl-scrape/player", params={"url": "https://x/p"})

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert "utf-8" in body["error"]


class TestScrapeGuildsRoute:
    """GET /api/chernobyl-scrape"""

    def test_links_mode(self, client, mock_scraper):
        mock_scraper.scrape_guilds.return_value = GuildScrapeResult(
            guilds=["Oxion"],
            mode=ScrapeMode.LINKS,
            links=[PlayerLink(name="Kaiser", url="https://x/a")],
            scraping_timestamp="2024-05-01T00:00:00+00:00",
        )

        response = client.get("/api/chernobyl-scrape", params={"guilds": "Oxion, ", "mode": "links"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["links"] == [{"nome": "Kaiser", "url": "https://x/a"}]
        assert data["total_links"] == 1
        mock_scraper.scrape_guilds.assert_awaited_once_with(["Oxion"], None, ScrapeMode.LINKS)

    def test_default_guilds(self, client, mock_scraper):
        mock_scraper.scrape_guilds.return_value = GuildScrapeResult(
            guilds=["Oxion", "Guilty"],
            scraping_timestamp="2024-05-01T00:00:00+00:00",
        )

        response = client.get("/api/chernobyl-scrape")

        assert response.json()["data"]["guild_info"] == {"nome": "Oxion + Guilty"}
        args = mock_scraper.scrape_guilds.await_args.args
        assert args[0] is None
        assert args[2] == ScrapeMode.FULL

    def test_unknown_mode_means_full(self, client, mock_scraper):
        mock_scraper.scrape_guilds.return_value = GuildScrapeResult(
            guilds=["Oxion"],
            scraping_timestamp="2024-05-01T00:00:00+00:00",
        )

        response = client.get("/api/chernobyl-scrape", params={"mode": "tudo"})

        assert response.status_code == 200
        assert response.json()["data"]["total_players"] == 0
        assert mock_scraper.scrape_guilds.await_args.args[2] == ScrapeMode.FULL

    def test_error(self, client, mock_scraper):
        mock_scraper.scrape_guilds.side_effect = ScrapeError("timeout")

        response = client.get("/api/chernobyl-scrape")

        assert response.status_code == 500
        assert response.json()["success"] is False


# =============================================================================
# Snapshots
# =============================================================================

class TestSnapshotsRoute:
    """/api/chernobyl-snapshots"""

    def test_list_default_limit(self, client, mock_db):
        mock_db.get_snapshots.return_value = [{"id": 1}]

        response = client.get("/api/chernobyl-snapshots")

        assert response.json() == {"success": True, "data": [{"id": 1}]}
        mock_db.get_snapshots.assert_awaited_once_with(1)

    def test_list_limit_clamped(self, client, mock_db):
        mock_db.get_snapshots.return_value = []

        client.get("/api/chernobyl-snapshots", params={"limit": "500"})
        mock_db.get_snapshots.assert_awaited_with(50)

        client.get("/api/chernobyl-snapshots", params={"limit": "abc"})
        mock_db.get_snapshots.assert_awaited_with(1)

    def test_list_error(self, client, mock_db):
        mock_db.get_snapshots.side_effect = RuntimeError("relation does not exist")

        response = client.get("/api/chernobyl-snapshots")

        assert response.status_code == 500
        assert response.json()["error"] == "relation does not exist"

    def test_create_requires_session(self, client, mock_db):
        response = client.post("/api/chernobyl-snapshots", json={"guilds": ["Oxion"]})

        assert response.status_code == 401
        mock_db.insert_snapshot.assert_not_called()

    def test_create_normalizes_row(self, logged_client, mock_db):
        mock_db.insert_snapshot.side_effect = lambda row: {"id": 7, **row}

        response = logged_client.post("/api/chernobyl-snapshots", json={
            "guilds": ["Oxion", "Guilty"],
            "players": [],
            "total_players": "12",
            "average_papd": 301,
        })

        assert response.status_code == 200
        row = mock_db.insert_snapshot.await_args.args[0]
        assert row["total_players"] == 12
        assert row["visible_count"] == 0
        assert row["private_count"] == 0
        assert row["average_papd"] == 301
        assert row["scraping_timestamp"]
        assert response.json()["data"]["id"] == 7


# =============================================================================
# Gearscore
# =============================================================================

class TestPlayersGearscoreGet:
    """GET /api/players-gearscore"""

    def test_latest_history_and_stats(self, client, mock_db, sample_player_rows):
        mock_db.get_players_with_history.return_value = sample_player_rows

        response = client.get("/api/players-gearscore")

        assert response.status_code == 200
        data = response.json()["data"]

        # jogador sem histórico (gearscore 0) fica de fora
        assert [p["family_name"] for p in data["players"]] == ["LagSwitch", "Nyx", "Kaiser", "Sunny"]
        kaiser = data["players"][2]
        assert kaiser["gearscore"] == 750
        assert kaiser["last_updated"] == "2024-03-01T00:00:00+00:00"
        assert kaiser["user_id"] == "101"

        stats = data["stats"]
        # LagSwitch (Defesa) e Sunny (Shai) não entram
        assert stats["total_players"] == 2
        assert stats["average_gearscore"] == 780
        assert stats["class_distribution"] == {"Bruxa": 1, "Guerreiro": 1}
        assert stats["gearscore_ranges"]["700-750"] == 1
        assert stats["gearscore_ranges"]["801-850"] == 1
        assert "history" not in data

    def test_sort_and_limit(self, client, mock_db, sample_player_rows):
        mock_db.get_players_with_history.return_value = sample_player_rows

        response = client.get("/api/players-gearscore", params={"sortBy": "family_name", "order": "asc", "limit": 2})

        data = response.json()["data"]
        assert [p["family_name"] for p in data["players"]] == ["Kaiser", "LagSwitch"]
        # estatísticas usam a lista completa
        assert data["stats"]["total_players"] == 2
        assert data["query"]["limit"] == 2

    def test_invalid_limit_means_all(self, client, mock_db, sample_player_rows):
        mock_db.get_players_with_history.return_value = sample_player_rows

        for limit in ("-5", "abc"):
            response = client.get("/api/players-gearscore", params={"limit": limit})

            assert response.status_code == 200
            data = response.json()["data"]
            assert len(data["players"]) == 4
            assert data["query"]["limit"] == 0

    def test_history(self, client, mock_db, sample_player_rows):
        mock_db.get_players_with_history.return_value = sample_player_rows[:1]
        mock_db.get_gearscore_history.return_value = [{"id": 9, "user_id": 101, "gearscore": 750}]

        response = client.get("/api/players-gearscore", params={"history": "true", "userId": "101"})

        data = response.json()["data"]
        assert data["history"] == [{"id": 9, "user_id": "101", "gearscore": 750}]
        mock_db.get_players_with_history.assert_awaited_once_with("101")
        mock_db.get_gearscore_history.assert_awaited_once_with("101", limit=30)

    def test_db_error(self, client, mock_db):
        mock_db.get_players_with_history.side_effect = RuntimeError("offline")

        response = client.get("/api/players-gearscore")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Erro ao buscar dados dos players",
            "message": "offline",
        }


class TestPlayersGearscorePost:
    """POST /api/players-gearscore"""

    PLAYER = {
        "user_id": "101",
        "family_name": "Kaiser",
        "character_name": "Kai",
        "main_class": "Guerreiro",
        "ap": 320,
        "aap": 330,
        "dp": 420,
    }

    def test_requires_session(self, client):
        response = client.post("/api/players-gearscore", json=self.PLAYER)
        assert response.status_code == 401

    def test_single_player(self, logged_client, mock_db):
        mock_db.upsert_player.return_value = {"id": 1}
        mock_db.insert_gearscore_history.return_value = {}

        response = logged_client.post("/api/players-gearscore", json=self.PLAYER)

        assert response.status_code == 200
        body = response.json()
        assert body["data"]["player_id"] == 1
        assert body["data"]["gearscore"] == 750
        history_kwargs = mock_db.insert_gearscore_history.await_args.kwargs
        assert history_kwargs["gearscore"] == 750
        assert history_kwargs["player_id"] == 1

    def test_missing_fields(self, logged_client, mock_db):
        player = dict(self.PLAYER, dp=0)

        response = logged_client.post("/api/players-gearscore", json=player)

        assert response.status_code == 400
        assert response.json()["error"] == "Dados obrigatórios não fornecidos"
        mock_db.upsert_player.assert_not_called()

    def test_db_error(self, logged_client, mock_db):
        mock_db.upsert_player.side_effect = RuntimeError("duplicate key")

        response = logged_client.post("/api/players-gearscore", json=self.PLAYER)

        assert response.status_code == 500
        assert response.json()["message"] == "duplicate key"

    def test_file_upload(self, logged_client, mock_db):
        mock_db.upsert_player.return_value = {"id": 1}
        mock_db.insert_gearscore_history.return_value = {}
        rows = [
            self.PLAYER,
            {"user_id": "102", "familia": "Nyx", "nick": "Nyxie", "classe": "Bruxa", "ap": "350", "awak_ap": 360, "def": 450},
            {"user_id": "103", "family_name": "Incompleto"},
        ]

        response = logged_client.post(
            "/api/players-gearscore",
            files={"file": ("players.json", json.dumps(rows), "application/json")},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["successCount"] == 2
        assert data["errorCount"] == 1
        assert data["errors"] == ["Player Incompleto: Dados obrigatórios faltando"]

        second = mock_db.upsert_player.await_args_list[1].args[0]
        assert second["family_name"] == "Nyx"
        assert second["character_name"] == "Nyxie"
        assert mock_db.insert_gearscore_history.await_args_list[1].kwargs["gearscore"] == 810

    def test_file_upload_invalid_json(self, logged_client):
        response = logged_client.post(
            "/api/players-gearscore",
            files={"file": ("players.json", "{not json", "application/json")},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Arquivo JSON inválido"

    def test_file_upload_not_array(self, logged_client):
        response = logged_client.post(
            "/api/players-gearscore",
            files={"file": ("players.json", json.dumps({"a": 1}), "application/json")},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "O arquivo deve conter um array de players"

    def test_file_upload_row_error(self, logged_client, mock_db):
        mock_db.upsert_player.side_effect = RuntimeError("violates constraint")

        response = logged_client.post(
            "/api/players-gearscore",
            files={"file": ("players.json", json.dumps([self.PLAYER]), "application/json")},
        )

        data = response.json()["data"]
        assert data["successCount"] == 0
        assert data["errors"] == ["Player Kaiser: violates constraint"]


def test_status(client):
    response = client.get("/api/status")
    assert response.status_code == 200
    assert response.json()["success"] is True
