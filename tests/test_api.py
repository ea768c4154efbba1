"""Integration tests for the bed assignment REST API."""

import pytest
from fastapi.testclient import TestClient

from bedassign.api.app import create_app
from bedassign.core.thoughts import ThoughtName


def _colony_payload() -> dict:
    return {
        "beds": [
            {"id": "low", "thing_id": 10, "map_id": "m1", "room_id": "r1"},
            {"id": "high", "thing_id": 11, "map_id": "m1", "room_id": "r2"},
            {"id": "double", "thing_id": 12, "map_id": "m1", "room_id": "r3", "sleeping_slots": 2},
        ],
        "pawns": [
            {"id": "ann", "name": "Ann", "thing_id": 1, "map_id": "m1", "owned_bed_id": "low"},
            {"id": "bob", "name": "Bob", "thing_id": 2, "map_id": "m1",
             "thoughts": [{"name": ThoughtName.SHARED_BED.value}]},
        ],
        "rooms": {"r1": 5.0, "r2": 50.0, "r3": 1.0},
    }


@pytest.fixture
def client():
    return TestClient(create_app())


@pytest.fixture
def colony_id(client):
    resp = client.post("/api/colonies", json={"colony": _colony_payload(), "name": "test"})
    assert resp.status_code == 200
    return resp.json()["id"]


class TestHealthCheck:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestColonies:
    def test_create(self, client):
        resp = client.post("/api/colonies", json={"colony": _colony_payload()})
        data = resp.json()
        assert resp.status_code == 200
        assert data["pawn_count"] == 2
        assert data["bed_count"] == 3
        assert data["config"]["claim_better_beds"] is True

    def test_create_with_settings_names(self, client):
        resp = client.post("/api/colonies", json={
            "colony": _colony_payload(), "config": {"ClaimBetterBeds": False},
        })
        assert resp.json()["config"]["claim_better_beds"] is False

    def test_invalid_snapshot(self, client):
        payload = _colony_payload()
        payload["pawns"][0]["owned_bed_id"] = "missing"
        resp = client.post("/api/colonies", json={"colony": payload})
        assert resp.status_code == 422

    def test_list_and_get(self, client, colony_id):
        assert any(c["id"] == colony_id for c in client.get("/api/colonies").json())
        assert client.get(f"/api/colonies/{colony_id}").json()["name"] == "test"

    def test_not_found(self, client):
        assert client.get("/api/colonies/nonexistent").status_code == 404

    def test_delete(self, client, colony_id):
        assert client.delete(f"/api/colonies/{colony_id}").json() == {"deleted": True}
        assert client.get(f"/api/colonies/{colony_id}").status_code == 404
        assert client.delete(f"/api/colonies/{colony_id}").status_code == 404

    def test_pawns_and_beds(self, client, colony_id):
        pawns = client.get(f"/api/colonies/{colony_id}/pawns").json()
        assert {p["id"]: p["owned_bed_id"] for p in pawns} == {"ann": "low", "bob": None}
        beds = client.get(f"/api/colonies/{colony_id}/beds", params={"usable_only": True}).json()
        assert [b["id"] for b in beds] == ["low", "high", "double"]
        assert beds[1]["impressiveness"] == 50.0

    def test_snapshot(self, client, colony_id):
        snap = client.get(f"/api/colonies/{colony_id}/snapshot").json()
        assert set(snap) == {"colony", "config", "forced_beds"}


class TestSettings:
    def test_get(self, client, colony_id):
        resp = client.get(f"/api/settings/{colony_id}")
        assert resp.json()["avoid_partner_penalty"] is True

    def test_update(self, client, colony_id):
        resp = client.put(f"/api/settings/{colony_id}", json={
            "claim_better_beds": False, "evaluation_interval_ticks": 60,
        })
        data = resp.json()
        assert data["claim_better_beds"] is False
        assert data["evaluation_interval_ticks"] == 60
        assert data["avoid_greedy_penalty"] is True

    def test_update_rejects_bad_interval(self, client, colony_id):
        resp = client.put(f"/api/settings/{colony_id}", json={"evaluation_interval_ticks": 0})
        assert resp.status_code == 422


class TestAssignment:
    def test_evaluate_upgrades(self, client, colony_id):
        resp = client.post(f"/api/assignment/{colony_id}/evaluate/ann")
        assert resp.json() == {"pawn_id": "ann", "branch": "better_bed", "bed_id": "high"}
        messages = client.get(f"/api/assignment/{colony_id}/messages").json()
        assert messages[-1]["pawn_ids"] == ["ann"]

    def test_evaluate_unknown_pawn(self, client, colony_id):
        resp = client.post(f"/api/assignment/{colony_id}/evaluate/zed")
        assert resp.status_code == 404

    def test_tick_all(self, client, colony_id):
        results = client.post(f"/api/assignment/{colony_id}/tick", json={}).json()
        assert {r["pawn_id"]: r["bed_id"] for r in results} == {"ann": "high", "bob": "low"}

    def test_forced_bed(self, client, colony_id):
        resp = client.put(f"/api/assignment/{colony_id}/forced/ann", json={"bed_id": "double"})
        data = resp.json()
        assert data["forced_bed_id"] == "double"
        assert data["owned_bed_id"] == "double"

        resp = client.post(f"/api/assignment/{colony_id}/evaluate/ann")
        assert resp.json()["branch"] is None

        resp = client.delete(f"/api/assignment/{colony_id}/forced/ann")
        assert resp.json()["forced_bed_id"] is None
        assert client.delete(f"/api/assignment/{colony_id}/forced/ann").status_code == 404

    def test_forced_unknown_bed(self, client, colony_id):
        resp = client.put(f"/api/assignment/{colony_id}/forced/ann", json={"bed_id": "nope"})
        assert resp.status_code == 404
