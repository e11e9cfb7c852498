from bson import ObjectId


def _create(client, headers, name="Otaniemi Community", **fields):
    r = client.post("/api/community", json={"name": name, **fields}, headers=headers)
    assert r.status_code == 200, r.text
    return r.json()


def test_create_and_get_community(client, make_user):
    headers, user_id = make_user()
    community = _create(client, headers, challenges=[{"id": "c1", "name": "Reduce energy by 10%"}])
    assert community["ownerId"] == user_id
    assert community["members"] == [user_id]

    body = client.get(f"/api/community/{community['_id']}", headers=headers).json()
    assert body["members"] == [{"_id": user_id, "name": "Test User"}]
    assert body["challenges"] == [{"id": "c1", "name": "Reduce energy by 10%"}]
    assert body["numLikes"] == 0
    assert "ratings" not in body


def test_invalid_community_id(client, make_user):
    headers, _ = make_user()
    r = client.put("/api/community/join/xyz", headers=headers)
    assert r.status_code == 500
    assert "Invalid Community id" in r.json()["detail"]


def test_join_list_and_achievement(client, db, make_user):
    owner, _ = make_user()
    joiner, joiner_id = make_user(name="Jane", email="jane@example.com")
    first = _create(client, owner, name="First")
    second = _create(client, owner, name="Second")

    r = client.put(f"/api/community/join/{first['_id']}", headers=joiner)
    assert joiner_id in r.json()["members"]
    client.put(f"/api/community/join/{second['_id']}", headers=joiner)
    # joining twice does not duplicate membership
    client.put(f"/api/community/join/{second['_id']}", headers=joiner)

    listed = client.get("/api/community/list", headers=joiner).json()
    assert sorted(c["name"] for c in listed) == ["First", "Second"]
    assert client.get("/api/user/achievements", headers=joiner).json()["communitiesJoined"] == 2

    client.delete(f"/api/community/{first['_id']}", headers=owner)
    client.put(f"/api/community/join/{second['_id']}", headers=joiner)
    # progress never goes down
    assert client.get("/api/user/achievements", headers=joiner).json()["communitiesJoined"] == 2


def test_top_actions_ranked_by_likes(client, make_user, make_action):
    headers, _ = make_user()
    other, _ = make_user(name="Other", email="other@example.com")
    a = make_action(headers, name="A")
    b = make_action(headers, name="B")
    c = make_action(headers, name="C")
    for h in (headers, other):
        client.put(f"/api/action/rate/{b}", json={"rating": 1}, headers=h)
    client.put(f"/api/action/rate/{c}", json={"rating": 1}, headers=headers)
    community = _create(client, headers, actions=[{"id": x, "name": n} for x, n in ((a, "A"), (b, "B"), (c, "C"))])

    top = client.get(f"/api/community/top/{community['_id']}", headers=headers).json()
    assert [x["name"] for x in top] == ["B", "C", "A"]
    assert [x["numLikes"] for x in top] == [2, 1, 0]

    top = client.get(f"/api/community/top/{community['_id']}", params={"limit": 1}, headers=headers).json()
    assert [x["name"] for x in top] == ["B"]


def test_rate_community(client, make_user):
    headers, _ = make_user()
    community = _create(client, headers)
    url = f"/api/community/rate/{community['_id']}"

    r = client.put(url, json={"rating": 1, "comment": "Great people"}, headers=headers)
    assert r.json()["numLikes"] == 1
    assert r.json()["userRating"] == 1

    r = client.put(url, json={"rating": 0}, headers=headers)
    assert r.json()["numLikes"] == 0

    r = client.put(url, json={"rating": 7}, headers=headers)
    assert r.status_code == 400


def test_community_comments(client, make_user):
    headers, user_id = make_user()
    community = _create(client, headers)
    base = f"/api/community/{community['_id']}"

    r = client.post(f"{base}/comment", json={"comment": "This is a fun community!"}, headers=headers)
    comment = r.json()
    assert comment["communityId"] == community["_id"]
    assert comment["userId"] == user_id
    assert comment["email"] == "testuser1@example.com"

    client.post(f"{base}/comment", json={"comment": "Second"}, headers=headers)
    listed = client.get(f"{base}/comments", headers=headers).json()
    assert [c["comment"] for c in listed] == ["Second", "This is a fun community!"]
    assert len(client.get("/api/user/communityComments", headers=headers).json()) == 2

    r = client.delete(f"{base}/comment/{comment['_id']}", headers=headers)
    assert r.json() == {"n": 1, "ok": 1}
    assert len(client.get(f"{base}/comments", headers=headers).json()) == 1


def test_comment_on_missing_community(client, make_user):
    headers, _ = make_user()
    r = client.post(f"/api/community/{ObjectId()}/comment", json={"comment": "hello"}, headers=headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Community not found"
