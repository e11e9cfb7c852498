def _create(client, headers, **fields):
    r = client.post("/api/household", json={"address": "Main street 1", "houseType": "apartment", **fields},
                    headers=headers)
    assert r.status_code == 200, r.text
    return r.json()


def test_create_sets_owner_household(client, make_user):
    headers, user_id = make_user()
    household = _create(client, headers)
    assert household["ownerId"] == user_id
    assert household["members"] == [user_id]
    assert client.get("/api/user/profile", headers=headers).json()["householdId"] == household["_id"]

    r = client.put(f"/api/household/{household['_id']}", json={"size": 72}, headers=headers)
    assert r.json()["size"] == 72
    assert r.json()["address"] == "Main street 1"


def test_invite_accept_and_remove(client, make_user):
    owner, owner_id = make_user()
    guest, guest_id = make_user(name="Jack", email="jack@example.com")
    household = _create(client, owner)

    r = client.post(f"/api/household/invite/{guest_id}", headers=owner)
    assert r.json()["pendingInvites"] == [guest_id]
    invites = client.get("/api/user/pendingInvites", headers=guest).json()
    assert [h["_id"] for h in invites["pendingHouseholdInvites"]] == [household["_id"]]

    r = client.put(f"/api/household/invite/{household['_id']}", json={"accepted": True}, headers=guest)
    assert r.json()["members"] == [owner_id, guest_id]
    assert r.json()["pendingInvites"] == []
    assert client.get("/api/user/profile", headers=guest).json()["householdId"] == household["_id"]

    r = client.put(f"/api/household/removemember/{household['_id']}/{guest_id}", headers=owner)
    assert r.json()["members"] == [owner_id]
    assert client.get("/api/user/profile", headers=guest).json()["householdId"] is None


def test_declined_invite(client, make_user):
    owner, _ = make_user()
    guest, guest_id = make_user(name="Jack", email="jack@example.com")
    household = _create(client, owner)
    client.post(f"/api/household/invite/{guest_id}", headers=owner)

    r = client.put(f"/api/household/invite/{household['_id']}", json={"accepted": False}, headers=guest)
    assert guest_id not in r.json()["members"]
    assert client.get("/api/user/pendingInvites", headers=guest).json()["pendingHouseholdInvites"] == []

    r = client.put(f"/api/household/invite/{household['_id']}", json={"accepted": True}, headers=guest)
    assert r.status_code == 404


def test_invite_without_household(client, make_user):
    headers, _ = make_user()
    _, other_id = make_user(name="Jack", email="jack@example.com")
    r = client.post(f"/api/household/invite/{other_id}", headers=headers)
    assert r.status_code == 400


def test_only_owner_deletes(client, make_user):
    owner, _ = make_user()
    stranger, _ = make_user(name="Jack", email="jack@example.com")
    household = _create(client, owner)

    assert client.delete(f"/api/household/{household['_id']}", headers=stranger).status_code == 403
    assert client.delete(f"/api/household/{household['_id']}", headers=owner).json() == {"n": 1, "ok": 1}
    assert client.get("/api/user/profile", headers=owner).json()["householdId"] is None


def test_appliances(client, make_user):
    headers, _ = make_user()
    household = _create(client, headers)

    r = client.put(f"/api/household/add/{household['_id']}", json={"appliance": "Dishwasher", "quantity": 1},
                   headers=headers)
    client.put(f"/api/household/add/{household['_id']}", json={"appliance": "Freezer"}, headers=headers)
    r = client.put(f"/api/household/remove/{household['_id']}", json={"appliance": "Dishwasher"}, headers=headers)
    assert r.json()["appliancesList"] == [{"appliance": "Freezer", "quantity": 1}]


def test_second_household_is_rejected(client, make_user):
    headers, user_id = make_user()
    first = _create(client, headers)

    r = client.post("/api/household", json={"address": "Elm street 2"}, headers=headers)
    assert r.status_code == 400
    assert client.get("/api/user/profile", headers=headers).json()["householdId"] == first["_id"]
    assert client.get(f"/api/household/{first['_id']}", headers=headers).json()["members"] == [user_id]


def test_member_switches_household_only_after_leaving(client, make_user):
    first_owner, first_owner_id = make_user()
    second_owner, second_owner_id = make_user(name="Anna", email="anna@example.com")
    guest, guest_id = make_user(name="Jack", email="jack@example.com")
    first = _create(client, first_owner)
    second = _create(client, second_owner, address="Elm street 2")

    client.post(f"/api/household/invite/{guest_id}", headers=first_owner)
    client.put(f"/api/household/invite/{first['_id']}", json={"accepted": True}, headers=guest)
    client.post(f"/api/household/invite/{guest_id}", headers=second_owner)

    r = client.put(f"/api/household/invite/{second['_id']}", json={"accepted": True}, headers=guest)
    assert r.status_code == 400
    second_now = client.get(f"/api/household/{second['_id']}", headers=guest).json()
    assert second_now["members"] == [second_owner_id]
    assert second_now["pendingInvites"] == [guest_id]

    client.put(f"/api/household/removemember/{first['_id']}/{guest_id}", headers=guest)
    r = client.put(f"/api/household/invite/{second['_id']}", json={"accepted": True}, headers=guest)
    assert r.json()["members"] == [second_owner_id, guest_id]
    first_now = client.get(f"/api/household/{first['_id']}", headers=guest).json()
    assert first_now["members"] == [first_owner_id]

    # the old household can no longer detach the guest
    r = client.put(f"/api/household/removemember/{first['_id']}/{guest_id}", headers=first_owner)
    assert r.status_code == 404
    assert client.get("/api/user/profile", headers=guest).json()["householdId"] == second["_id"]
