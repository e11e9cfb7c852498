from fastapi.testclient import TestClient

import database
import main
from seed import DEFAULT_ACTIONS, ensure_seed_data


def test_root(client):
    assert client.get("/").json() == {"app": "YouPower API", "status": "ok"}


def test_health_reports_collections(client, make_user):
    make_user()
    body = client.get("/test").json()
    assert body["connection_status"] == "Connected"
    assert "user" in body["collections"]


def test_without_database(monkeypatch):
    monkeypatch.setattr(database, "db", None)
    client = TestClient(main.app)
    r = client.post("/api/user/register", json={"name": "X", "email": "x@example.com", "password": "secret123"})
    assert r.status_code == 500
    assert r.json()["detail"] == "Database not available"
    assert client.get("/test").json()["connection_status"] == "Not Connected"


def test_seed_is_idempotent(db):
    assert ensure_seed_data() == len(DEFAULT_ACTIONS)
    assert ensure_seed_data() == 0
    assert db["action"].count_documents({}) == len(DEFAULT_ACTIONS)
    assert db["user"].count_documents({}) == 1
