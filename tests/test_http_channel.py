from __future__ import annotations

from fastapi.testclient import TestClient

from adapters.command_queue import PendingCommandQueue
from adapters.http_channel import create_app
from core.config import LayoutConfig
from core.overlay import OverlayService
from core.store import MatchStore


def _client() -> tuple[TestClient, OverlayService, PendingCommandQueue]:
    commands = PendingCommandQueue()
    service = OverlayService(MatchStore(), commands, LayoutConfig())
    return TestClient(create_app(service, commands)), service, commands


ADD = {
    "action": "addMatch",
    "data": {
        "tabId": "tab-1",
        "match": {
            "matchId": "g_1_abc",
            "homeTeam": "Getafe",
            "awayTeam": "Cadiz",
            "time": "12'",
            "url": "https://www.flashscore.es/partido/abc/",
        },
        "competition": {"title": "LaLiga", "category": "ESPAÑA"},
    },
}


def test_add_then_remove_round_trip() -> None:
    client, service, _ = _client()

    assert client.post("/", json=ADD).json() == {"status": "ok"}
    assert client.get("/health").json() == {"status": "ok", "matches": 1}

    view = client.get("/view").json()
    assert view["total_matches"] == 1
    competition = view["sports"][0]["competitions"][0]
    assert competition["competition"]["id"] == "ESPAÑA:LaLiga"
    assert competition["matches"][0]["state"] == "live"

    client.post("/", json={"action": "removeMatch", "data": {"match": {"matchId": "g_1_abc"}}})
    assert len(service.store) == 0
    assert client.get("/view").json()["is_empty"] is True


def test_malformed_messages_are_acknowledged_and_dropped() -> None:
    client, service, _ = _client()

    assert client.post("/", content=b"{not json").json() == {"status": "ok"}
    assert client.post("/", json={"action": "addMatch", "data": {"match": {}}}).json() == {"status": "ok"}
    assert client.post("/", json={"action": "ping"}).json() == {"status": "ok"}
    assert len(service.store) == 0


def test_commands_are_consumed_per_tab() -> None:
    client, service, _ = _client()
    client.post("/", json=ADD)
    service.remove_match("g_1_abc")

    assert client.get("/commands", params={"tabId": "other"}).json() == {}
    assert client.get("/commands", params={"tabId": "tab-1"}).json() == {"action": "uncheck", "matchId": "g_1_abc"}
    assert client.get("/commands", params={"tabId": "tab-1"}).json() == {}
    assert client.get("/commands").json() == {}


def test_cors_preflight_is_allowed() -> None:
    client, _, _ = _client()
    response = client.options(
        "/",
        headers={
            "Origin": "https://www.flashscore.es",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
