from bson import ObjectId


def _create(client, headers, name="Brf Solrosen"):
    r = client.post("/api/cooperative", json={
        "name": name, "yearOfConst": 1972, "area": 5400, "meters": {"electricity": "E-1", "heating": "H-1"},
    }, headers=headers)
    assert r.status_code == 200, r.text
    return r.json()


def test_create_get_update(client, make_user):
    headers, _ = make_user()
    coop = _create(client, headers)
    assert coop["actions"] == []
    assert coop["meters"] == {"electricity": "E-1", "heating": "H-1"}

    r = client.put(f"/api/cooperative/{coop['_id']}", json={"area": 5500}, headers=headers)
    assert r.json()["area"] == 5500
    assert r.json()["name"] == "Brf Solrosen"

    assert [c["name"] for c in client.get("/api/cooperative", headers=headers).json()] == ["Brf Solrosen"]


def test_missing_cooperative(client, make_user):
    headers, _ = make_user()
    r = client.get(f"/api/cooperative/{ObjectId()}", headers=headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Cooperative not found"


def test_embedded_actions(client, make_user):
    headers, _ = make_user()
    coop = _create(client, headers)
    base = f"/api/cooperative/{coop['_id']}/action"

    r = client.post(base, json={"name": "New windows", "description": "Triple glazing",
                                "date": "2016-05-01T00:00:00"}, headers=headers)
    actions = r.json()["actions"]
    assert len(actions) == 1
    action_id = actions[0]["_id"]

    r = client.put(f"{base}/{action_id}", json={"name": "New windows", "description": "Quadruple glazing"},
                   headers=headers)
    assert r.json()["actions"][0]["description"] == "Quadruple glazing"

    r = client.put(f"{base}/{ObjectId()}", json={"name": "x"}, headers=headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Cooperative action not found"

    r = client.delete(f"{base}/{action_id}", headers=headers)
    assert r.json()["actions"] == []
