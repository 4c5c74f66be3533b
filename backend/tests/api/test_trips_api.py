"""Trip, invitation and dashboard endpoints through the Flask test client."""

from conftest import add_expense, add_trip

TRIP = {
    "trip_name": "Goa Trip",
    "trip_desc": "Beaches and forts",
    "start_date": "2099-05-01",
    "end_date": "2099-05-04",
    "itinerary": [
        {"date": "2099-05-02", "place_to_visit": "Fort Aguada"},
        {"date": "2099-05-03", "place_to_visit": "Baga Beach"},
    ],
}


def test_create_trip_and_fetch_summary(client, users, auth_headers):
    resp = client.post("/api/v1/trips", json=TRIP, headers=auth_headers(users["a"]))
    assert resp.status_code == 201
    trip_id = resp.get_json()["trip"]["_id"]

    summary = client.get(f"/api/v1/trips/{trip_id}/summary", headers=auth_headers(users["a"])).get_json()

    assert summary["total_expenses"] == 0
    assert summary["places_to_visit"] == ["Fort Aguada", "Baga Beach"]
    assert summary["total_days"] == 3


def test_invalid_trip_payload(client, users, auth_headers):
    resp = client.post("/api/v1/trips", json=dict(TRIP, end_date="2099-04-01"), headers=auth_headers(users["a"]))
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "End date must be after start date"


def test_non_member_cannot_read_trip(client, users, auth_headers, store):
    trip_id = add_trip(store, users["a"])
    assert client.get(f"/api/v1/trips/{trip_id}", headers=auth_headers(users["b"])).status_code == 403


def test_unknown_trip_is_404(client, users, auth_headers):
    resp = client.get("/api/v1/trips/65f1c0a2b3c4d5e6f7a8b9c0", headers=auth_headers(users["a"]))
    assert resp.status_code == 404
    assert resp.get_json()["code"] == "TRIP_NOT_FOUND"


def test_invite_accept_flow(client, users, auth_headers, store):
    trip_id = add_trip(store, users["a"])
    invited = client.post(
        f"/api/v1/trips/{trip_id}/invite", json={"invitee_id": users["b"]}, headers=auth_headers(users["a"])
    )
    assert invited.status_code == 201

    pending = client.get("/api/v1/users/invitations", headers=auth_headers(users["b"])).get_json()
    invitation_id = pending[0]["invitation_id"]

    accept_url = f"/api/v1/users/invitations/{invitation_id}/accept"
    accepted = client.post(accept_url, headers=auth_headers(users["b"]))
    assert accepted.status_code == 200
    assert accepted.get_json()["trip"]["trip_members"] == [users["a"], users["b"]]

    assert client.post(accept_url, headers=auth_headers(users["b"])).status_code == 404


def test_duplicate_invite_conflicts(client, users, auth_headers, store):
    trip_id = add_trip(store, users["a"])
    url = f"/api/v1/trips/{trip_id}/invite"
    client.post(url, json={"invitee_id": users["c"]}, headers=auth_headers(users["a"]))
    assert client.post(url, json={"invitee_id": users["c"]}, headers=auth_headers(users["a"])).status_code == 409


def test_delete_trip(client, users, auth_headers, store, goa_trip):
    add_expense(store, goa_trip, users["a"], 90, [users["a"], users["b"]])

    assert client.delete(f"/api/v1/trips/{goa_trip}", headers=auth_headers(users["b"])).status_code == 403
    resp = client.delete(f"/api/v1/trips/{goa_trip}", headers=auth_headers(users["a"]))

    assert resp.status_code == 200
    assert resp.get_json()["removed"]["expenses"] == 1
    assert store.find_trip(goa_trip) is None


def test_members_listing(client, users, auth_headers, goa_trip):
    resp = client.get(f"/api/v1/trips/{goa_trip}/members", headers=auth_headers(users["c"]))
    assert [m["user_type"] for m in resp.get_json()] == ["member"] * 3


def test_dashboard(client, users, auth_headers, store):
    trip_id = add_trip(store, users["b"], members=[users["b"]])
    resp = client.get("/api/v1/users/dashboard", headers=auth_headers(users["b"]))
    body = resp.get_json()
    assert [t["trip_id"] for t in body["created_trips"]] == [trip_id]
    assert body["joined_trips"] == []


def test_oversized_budget_is_400(client, users, auth_headers):
    resp = client.post("/api/v1/trips", json=dict(TRIP, planned_budget="1e30"), headers=auth_headers(users["a"]))
    assert resp.status_code == 400


def test_object_invitee_is_400_and_stores_nothing(client, users, auth_headers, store):
    resp = client.post(
        "/api/v1/trips", json=dict(TRIP, trip_members=[{"id": users["b"]}]), headers=auth_headers(users["a"])
    )
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "INVALID_ID"
    assert store.find_trips() == []


def test_non_object_bodies_are_400(client, users, auth_headers, goa_trip):
    headers = auth_headers(users["a"])
    assert client.post("/api/v1/trips", json=[1, 2], headers=headers).status_code == 400
    assert client.post(f"/api/v1/trips/{goa_trip}/invite", json=[users["b"]], headers=headers).status_code == 400
