import mongomock
import pytest
from fastapi.testclient import TestClient

import database
import main


@pytest.fixture
def db(monkeypatch):
    mock_db = mongomock.MongoClient()["youpower_test"]
    monkeypatch.setattr(database, "db", mock_db)
    database.ensure_indexes()
    return mock_db


@pytest.fixture
def client(db):
    return TestClient(main.app)


@pytest.fixture
def make_user(client):
    def _make_user(name="Test User", email="testuser1@example.com", language="English"):
        r = client.post("/api/user/register", json={
            "name": name, "email": email, "password": "secret123", "language": language,
        })
        assert r.status_code == 200, r.text
        headers = {"Authorization": f"Bearer {r.json()['token']}"}
        profile = client.get("/api/user/profile", headers=headers).json()
        return headers, profile["_id"]
    return _make_user


@pytest.fixture
def make_action(client):
    def _make_action(headers, name="Turn off the lights", **fields):
        body = {"name": name, "description": "Save some energy", **fields}
        r = client.post("/api/action", json=body, headers=headers)
        assert r.status_code == 200, r.text
        return r.json()["_id"]
    return _make_action
