"""Expense, settlement, report and booking endpoints through the Flask test client."""

from datetime import datetime

from conftest import add_expense


def test_add_expense_and_settle(client, users, auth_headers, goa_trip):
    a, b, c = users["a"], users["b"], users["c"]
    resp = client.post("/api/v1/expenses", json={
        "trip_id": goa_trip,
        "amount": 900,
        "category": "food",
        "paid_to": "Beach Shack",
        "payment_date": "2024-05-02",
        "split_between": [a, b, c],
    }, headers=auth_headers(a))
    assert resp.status_code == 201
    assert resp.get_json()["payment_date"] == "2024-05-02T00:00:00"

    owed_to_a = client.get(f"/api/v1/expenses/trip/{goa_trip}/owed-to", headers=auth_headers(a)).get_json()
    assert [(e["user_id"], e["amount"]) for e in owed_to_a] == [(b, 300.0), (c, 300.0)]

    owed_by_b = client.get(f"/api/v1/expenses/trip/{goa_trip}/owed-by", headers=auth_headers(b)).get_json()
    assert [(e["user_id"], e["amount"]) for e in owed_by_b] == [(a, 300.0)]

    # Another member's view through the query parameter
    via_query = client.get(
        f"/api/v1/expenses/trip/{goa_trip}/owed-by?user_id={c}", headers=auth_headers(a)
    ).get_json()
    assert via_query == [{"user_id": a, "full_name": "Asha Rao", "avatar": None, "amount": 300.0}]


def test_missing_payment_date(client, users, auth_headers, goa_trip):
    resp = client.post("/api/v1/expenses", json={
        "trip_id": goa_trip, "amount": 10, "category": "food",
        "paid_to": "Cafe", "split_between": [users["a"]],
    }, headers=auth_headers(users["a"]))
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Payment Date is required !!"


def test_empty_split_in_store_is_generic_500(client, users, auth_headers, goa_trip, store):
    add_expense(store, goa_trip, users["a"], 10, [])

    resp = client.get(f"/api/v1/expenses/trip/{goa_trip}/owed-to", headers=auth_headers(users["a"]))

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Something went wrong !!", "code": "INTERNAL_ERROR"}


def test_contributions_and_expense_summary(client, users, auth_headers, goa_trip, store):
    add_expense(store, goa_trip, users["b"], 250, [users["a"], users["b"]])
    add_expense(store, goa_trip, users["a"], 50, [users["a"], users["b"]])

    rows = client.get(f"/api/v1/expenses/trip/{goa_trip}/contributions", headers=auth_headers(users["a"])).get_json()
    assert [(r["full_name"], r["total_paid"]) for r in rows] == [("Bilal Khan", 250.0), ("Asha Rao", 50.0)]

    summary = client.get(f"/api/v1/trips/{goa_trip}/expense-summary", headers=auth_headers(users["a"])).get_json()
    assert summary["total_expenses"] == 300.0
    assert len(summary["recent_expenses"]) == 2


def test_reports(client, users, auth_headers, goa_trip, store):
    a = users["a"]
    add_expense(store, goa_trip, a, 100, [a], datetime(2024, 3, 1), "food")
    add_expense(store, goa_trip, a, 50, [a], datetime(2024, 1, 9), "food")
    add_expense(store, goa_trip, a, 200, [a], datetime(2023, 6, 2), "travel")

    categories = client.get("/api/v1/users/reports/categories", headers=auth_headers(a)).get_json()
    assert categories == [
        {"year": 2023, "category": "travel", "total_amount": 200.0},
        {"year": 2024, "category": "food", "total_amount": 150.0},
    ]

    monthly = client.get("/api/v1/users/reports/monthly", headers=auth_headers(a)).get_json()
    assert [(m["year"], m["month"]) for m in monthly] == [(2023, "June"), (2024, "January"), (2024, "March")]


def test_bookings(client, users, auth_headers, goa_trip):
    resp = client.post("/api/v1/bookings", json={
        "trip_id": goa_trip,
        "booking_type": "hotel",
        "booking_details": {
            "hotel_name": "Sea Breeze", "check_in_date": "2024-05-01",
            "checkout_date": "2024-05-04", "location": "Calangute",
        },
    }, headers=auth_headers(users["b"]))
    assert resp.status_code == 201

    listing = client.get(f"/api/v1/bookings/trip/{goa_trip}", headers=auth_headers(users["c"])).get_json()
    assert listing["bookings"][0]["booking_details"]["hotel_name"] == "Sea Breeze"


def test_non_object_body_is_400(client, users, auth_headers):
    resp = client.post("/api/v1/expenses", json=[1, 2], headers=auth_headers(users["a"]))
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Request body must be a JSON object", "code": "VALIDATION_ERROR"}

    resp = client.post("/api/v1/bookings", json=[1, 2], headers=auth_headers(users["a"]))
    assert resp.status_code == 400


def test_oversized_amount_is_400(client, users, auth_headers, goa_trip):
    resp = client.post("/api/v1/expenses", json={
        "trip_id": goa_trip, "amount": 1e30, "category": "food", "paid_to": "Cafe",
        "payment_date": "2024-05-02", "split_between": [users["a"]],
    }, headers=auth_headers(users["a"]))
    assert resp.status_code == 400
    assert "must not exceed" in resp.get_json()["error"]
