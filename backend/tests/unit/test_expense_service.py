"""Unit tests for expense ingestion."""

from datetime import datetime

import pytest

from conftest import add_expense, add_trip
from tripsplit.core.expense_service import ExpenseService
from tripsplit.errors import NotFoundError, PermissionDeniedError, ValidationError

NOW = datetime(2024, 6, 1, 9, 0)


def _payload(trip_id, members, **overrides):
    payload = {
        "trip_id": trip_id,
        "amount": "900",
        "category": "food",
        "paid_to": "Beach Shack",
        "payment_date": "2024-05-02T19:30:00Z",
        "split_between": members,
        "description": "  Dinner ",
    }
    payload.update(overrides)
    return payload


def test_add_expense_defaults_payer_to_caller(store, users, goa_trip):
    members = [users["a"], users["b"], users["c"]]

    expense = ExpenseService(store).add_expense(users["b"], _payload(goa_trip, members), now=NOW)

    assert expense["paid_by"] == users["b"]
    assert expense["amount"] == 900.0
    assert expense["description"] == "Dinner"
    assert expense["payment_date"] == datetime(2024, 5, 2, 19, 30)
    assert len(store.find_expenses({"trip_id": goa_trip})) == 1


def test_duplicate_split_members_collapse(store, users, goa_trip):
    a, b = users["a"], users["b"]
    expense = ExpenseService(store).add_expense(a, _payload(goa_trip, [a, b, a]), now=NOW)
    assert expense["split_between"] == [a, b]


@pytest.mark.parametrize("overrides, message", [
    ({"amount": 0}, "amount must be greater than 0"),
    ({"amount": "-5"}, "amount must be greater than 0"),
    ({"amount": "abc"}, "amount must be a number"),
    ({"payment_date": None}, "Payment Date is required !!"),
    ({"payment_date": "2024-06-02"}, "Payment Date cannot be in the future"),
    ({"split_between": []}, "Split between must be a non-empty array of user IDs."),
    ({"category": "gifts"}, "category must be one of"),
    ({"paid_to": "  "}, "paid_to is required"),
])
def test_invalid_expense(store, users, goa_trip, overrides, message):
    payload = _payload(goa_trip, [users["a"]], **overrides)
    with pytest.raises(ValidationError, match=message):
        ExpenseService(store).add_expense(users["a"], payload, now=NOW)
    assert store.find_expenses() == []


def test_expense_for_unknown_trip(store, users):
    with pytest.raises(NotFoundError):
        ExpenseService(store).add_expense(
            users["a"], _payload("65f1c0a2b3c4d5e6f7a8b9c0", [users["a"]]), now=NOW
        )


def test_non_member_cannot_add_expense(store, users):
    trip = add_trip(store, users["a"])
    with pytest.raises(PermissionDeniedError):
        ExpenseService(store).add_expense(users["b"], _payload(trip, [users["a"]]), now=NOW)


def test_split_members_must_belong_to_trip(store, users):
    trip = add_trip(store, users["a"], members=[users["a"], users["b"]])
    with pytest.raises(ValidationError, match="non-members"):
        ExpenseService(store).add_expense(users["a"], _payload(trip, [users["a"], users["c"]]), now=NOW)


def test_list_trip_expenses_newest_first(store, users, goa_trip):
    a = users["a"]
    add_expense(store, goa_trip, a, 10, [a], payment_date=datetime(2024, 5, 1))
    add_expense(store, goa_trip, a, 20, [a], payment_date=datetime(2024, 5, 3))

    listed = ExpenseService(store).list_trip_expenses(a, goa_trip)

    assert [e["amount"] for e in listed] == [20, 10]


def test_today_is_taken_in_report_offset(store, users, goa_trip):
    # 20:00 UTC on 1 June is already 2 June in +05:30
    late_evening = datetime(2024, 6, 1, 20, 0)
    payload = _payload(goa_trip, [users["a"]], payment_date="2024-06-02")

    expense = ExpenseService(store, report_offset="+05:30").add_expense(users["a"], payload, now=late_evening)
    assert expense["payment_date"] == datetime(2024, 6, 2)

    with pytest.raises(ValidationError, match="future"):
        ExpenseService(store, report_offset="+00:00").add_expense(users["a"], payload, now=late_evening)


def test_oversized_amount_rejected(store, users, goa_trip):
    with pytest.raises(ValidationError, match="must not exceed"):
        ExpenseService(store).add_expense(users["a"], _payload(goa_trip, [users["a"]], amount=1e30), now=NOW)
    assert store.find_expenses() == []
