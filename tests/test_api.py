"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from gridiron_draft.api.dependencies import get_change_feed, get_espn_client
from gridiron_draft.clients.espn import ESPNClient
from gridiron_draft.database import get_db
from gridiron_draft.main import app
from gridiron_draft.models import DraftOrderEntry, League
from gridiron_draft.services.live import DraftRoom


@pytest.fixture
def espn_state(espn_transport) -> dict:
    """Transport the overridden ESPN client uses; tests may swap it."""
    return {"transport": espn_transport()}


@pytest.fixture
def api(session_factory, feed, espn_state, settings, players):
    def override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    async def override_espn():
        async with ESPNClient(settings=settings, transport=espn_state["transport"]) as client:
            yield client

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_change_feed] = lambda: feed
    app.dependency_overrides[get_espn_client] = override_espn

    yield TestClient(app)
    app.dependency_overrides.clear()


def _as(user_id: str) -> dict[str, str]:
    return {"X-User-Id": user_id}


@pytest.fixture
def live_league(api) -> str:
    """Two-member league with the draft started via the API."""
    league = api.post("/api/leagues", json={"name": "Pool", "display_name": "Alice"}, headers=_as("alice"))
    league_id = league.json()["id"]
    api.post(f"/api/leagues/{league_id}/join", json={"display_name": "Bob"}, headers=_as("bob"))
    api.post(f"/api/leagues/{league_id}/draft-order/from-join-order", headers=_as("alice"))
    api.post(f"/api/draft/{league_id}/start", headers=_as("alice"))
    return league_id


class TestHealth:
    def test_health(self, api) -> None:
        response = api.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestLeagueRoutes:
    def test_write_requires_user_header(self, api) -> None:
        response = api.post("/api/leagues", json={"name": "Pool", "display_name": "Alice"})
        assert response.status_code == 401

    def test_create_and_read(self, api) -> None:
        created = api.post("/api/leagues", json={"name": "Pool", "display_name": "Alice"}, headers=_as("alice"))
        assert created.status_code == 201
        league_id = created.json()["id"]

        league = api.get(f"/api/leagues/{league_id}").json()
        assert league["status"] == "pre_draft"
        members = api.get(f"/api/leagues/{league_id}/members").json()
        assert [m["user_id"] for m in members] == ["alice"]

    def test_unknown_league_is_404(self, api) -> None:
        response = api.get("/api/leagues/missing")
        assert response.status_code == 404
        assert "missing" in response.json()["detail"]

    def test_only_commissioner_orders(self, api) -> None:
        league_id = api.post(
            "/api/leagues", json={"name": "Pool", "display_name": "Alice"}, headers=_as("alice")
        ).json()["id"]
        api.post(f"/api/leagues/{league_id}/join", json={"display_name": "Bob"}, headers=_as("bob"))

        response = api.put(
            f"/api/leagues/{league_id}/draft-order", json={"user_ids": ["bob", "alice"]}, headers=_as("bob")
        )
        assert response.status_code == 403

    def test_bad_order_is_422(self, api) -> None:
        league_id = api.post(
            "/api/leagues", json={"name": "Pool", "display_name": "Alice"}, headers=_as("alice")
        ).json()["id"]

        response = api.put(
            f"/api/leagues/{league_id}/draft-order", json={"user_ids": ["alice"]}, headers=_as("alice")
        )
        assert response.status_code == 422


class TestDraftRoutes:
    """Tests for the draft endpoints."""

    def test_state_shows_owner_on_the_clock(self, api, live_league) -> None:
        state = api.get(f"/api/draft/{live_league}").json()

        assert state["league"]["status"] == "draft"
        assert state["on_the_clock"] == "alice"
        assert [e["user_id"] for e in state["order"]] == ["alice", "bob"]

    def test_out_of_turn_pick_rejected_with_reason(self, api, live_league) -> None:
        response = api.post(f"/api/draft/{live_league}/picks", json={"player_id": "p-allen"}, headers=_as("bob"))

        assert response.status_code == 409
        assert response.json()["reason"] == "not_your_turn"
        assert response.json()["detail"] == "Not your turn"

    def test_pick_then_clock_moves(self, api, live_league) -> None:
        response = api.post(
            f"/api/draft/{live_league}/picks", json={"player_id": "p-mahomes"}, headers=_as("alice")
        )
        assert response.status_code == 201
        assert response.json()["pick_number"] == 1

        assert api.get(f"/api/draft/{live_league}").json()["on_the_clock"] == "bob"
        available = api.get(f"/api/draft/{live_league}/available").json()
        assert "p-mahomes" not in {p["id"] for p in available}

    def test_turn_lookup(self, api, live_league) -> None:
        response = api.get(f"/api/draft/{live_league}/turn", params={"pick_number": 3})
        assert response.json() == {"pick_number": 3, "user_id": "bob"}

    def test_turn_lookup_rejects_non_positive_pick(self, api, live_league) -> None:
        response = api.get(f"/api/draft/{live_league}/turn", params={"pick_number": 0})
        assert response.status_code == 422

    def test_reset(self, api, live_league) -> None:
        api.post(f"/api/draft/{live_league}/picks", json={"player_id": "p-mahomes"}, headers=_as("alice"))

        assert api.post(f"/api/draft/{live_league}/reset", headers=_as("bob")).status_code == 403
        response = api.post(f"/api/draft/{live_league}/reset", headers=_as("alice"))

        assert response.json()["status"] == "pre_draft"
        assert api.get(f"/api/draft/{live_league}/picks").json() == []

    def test_attached_room_follows_picks(self, api, live_league, feed) -> None:
        state = api.get(f"/api/draft/{live_league}").json()
        room = DraftRoom(
            League.model_validate(state["league"]),
            order=[DraftOrderEntry.model_validate(e) for e in state["order"]],
        )
        feed.attach(room)

        api.post(f"/api/draft/{live_league}/picks", json={"player_id": "p-kelce"}, headers=_as("alice"))

        assert room.drafted_player_ids == {"p-kelce"}
        assert room.on_the_clock == "bob"


class TestScoringRoutes:
    def test_score_event(self, api, live_league) -> None:
        response = api.post("/api/scoring/events/401671793", headers=_as("alice"))

        assert response.status_code == 200
        report = response.json()
        assert report["game"] == "KC 32 - 29 BUF"
        assert report["stat_lines"] == 5

    def test_upstream_failure_is_502(self, api, espn_state, espn_transport) -> None:
        espn_state["transport"] = espn_transport(fail_with=500, failures=-1)

        response = api.post("/api/scoring/events/401671793", headers=_as("alice"))
        assert response.status_code == 502

    def test_event_id_must_be_numeric(self, api) -> None:
        response = api.post("/api/scoring/events/not-a-game", headers=_as("alice"))
        assert response.status_code == 422


class TestStandingsRoutes:
    def test_members_listed_before_scoring(self, api, live_league) -> None:
        standings = api.get(f"/api/standings/{live_league}").json()

        assert [(s["rank"], s["total_points"]) for s in standings] == [(1, 0.0), (2, 0.0)]
        assert {s["display_name"] for s in standings} == {"Alice", "Bob"}

    def test_bad_sort_column_is_422(self, api, live_league) -> None:
        response = api.get(f"/api/standings/{live_league}/players", params={"sort_by": "vibes"})
        assert response.status_code == 422


class TestPlayerRoutes:
    def test_list_players(self, api) -> None:
        response = api.get("/api/players", params={"position": "QB"})
        assert {p["id"] for p in response.json()} == {"p-mahomes", "p-allen"}
