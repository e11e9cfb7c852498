from achievements import update_achievement


def test_register_and_login(client, make_user):
    make_user()
    r = client.post("/api/user/token", json={"email": "testuser1@example.com", "password": "secret123"})
    assert r.status_code == 200
    assert r.json()["name"] == "Test User"

    r = client.post("/api/user/token", json={"email": "testuser1@example.com", "password": "wrong-password"})
    assert r.status_code == 401


def test_register_twice(client, make_user):
    make_user()
    r = client.post("/api/user/register", json={
        "name": "Again", "email": "testuser1@example.com", "password": "secret123",
    })
    assert r.status_code == 400
    assert r.json()["detail"] == "Email already registered"


def test_argon2_accounts_can_log_in(client):
    client.post("/api/user/register", json={
        "name": "Argo", "email": "argo@example.com", "password": "secret123", "algo": "argon2",
    })
    r = client.post("/api/user/token", json={"email": "argo@example.com", "password": "secret123"})
    assert r.status_code == 200


def test_bad_token(client, db):
    r = client.get("/api/user/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_update_profile(client, make_user):
    headers, _ = make_user()
    r = client.put("/api/user/profile", json={"language": "Swedish", "toRehearse": {"done": True}},
                   headers=headers)
    profile = r.json()["profile"]
    assert profile["language"] == "Swedish"
    assert profile["name"] == "Test User"
    assert profile["toRehearse"] == {"done": True}


def test_action_state_moves_between_buckets(client, make_user, make_action):
    headers, _ = make_user()
    action_id = make_action(headers)
    url = f"/api/user/action/{action_id}"

    buckets = client.put(url, json={"state": "inProgress"}, headers=headers).json()
    entry = buckets["inProgress"][action_id]
    assert entry["name"] == "Turn off the lights"
    assert len(entry["startedDate"]) == 1

    buckets = client.put(url, json={"state": "pending", "postponed": "2030-01-01T00:00:00"},
                         headers=headers).json()
    assert action_id not in buckets["inProgress"]
    entry = buckets["pending"][action_id]
    assert entry["postponedDate"] == ["2030-01-01T00:00:00"]
    assert len(entry["startedDate"]) == 1

    buckets = client.put(url, json={"state": "done"}, headers=headers).json()
    assert list(buckets["done"]) == [action_id]
    assert action_id not in buckets["pending"]
    assert len(buckets["done"][action_id]["doneDate"]) == 1
    assert client.get("/api/user/actions", headers=headers).json() == buckets
    assert client.get("/api/user/achievements", headers=headers).json() == {"actionsDone": 1}


def test_pending_requires_postponed_date(client, make_user, make_action):
    headers, _ = make_user()
    action_id = make_action(headers)
    r = client.put(f"/api/user/action/{action_id}", json={"state": "pending"}, headers=headers)
    assert r.status_code == 400


def test_unknown_state_rejected(client, make_user, make_action):
    headers, _ = make_user()
    action_id = make_action(headers)
    r = client.put(f"/api/user/action/{action_id}", json={"state": "someday"}, headers=headers)
    assert r.status_code == 422


def test_achievement_is_monotonic(db, client, make_user):
    make_user()
    user = db["user"].find_one({"email": "testuser1@example.com"})
    assert update_achievement(user, "actionsDone", 3) == 3
    assert update_achievement(user, "actionsDone", 1) == 3
    assert update_achievement(user, "actionsDone", 4) == 4
