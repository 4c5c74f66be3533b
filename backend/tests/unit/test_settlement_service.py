"""Unit tests for the settlement engine."""

from datetime import datetime
from decimal import Decimal

import pytest

from conftest import add_expense
from tripsplit.core.settlement_service import SettlementEngine
from tripsplit.errors import ComputationError
from tripsplit.expenses.models import Expense
from tripsplit.ledger import RecordKind


def test_goa_trip_owed_to_payer(store, users, goa_trip):
    a, b, c = users["a"], users["b"], users["c"]
    add_expense(store, goa_trip, a, 900, [a, b, c])

    owed_to_a = SettlementEngine(store).amount_owed_to_user(goa_trip, a)

    assert owed_to_a == [
        {"user_id": b, "full_name": "Bilal Khan", "avatar": None, "amount": 300.0},
        {"user_id": c, "full_name": "Chen Li", "avatar": None, "amount": 300.0},
    ]


def test_goa_trip_owed_by_member(store, users, goa_trip):
    a, b, c = users["a"], users["b"], users["c"]
    add_expense(store, goa_trip, a, 900, [a, b, c])

    owed_by_b = SettlementEngine(store).amount_owed_by_user(goa_trip, b)

    assert owed_by_b == [{"user_id": a, "full_name": "Asha Rao", "avatar": None, "amount": 300.0}]


def test_payer_never_owes_themself(store, users, goa_trip):
    a = users["a"]
    add_expense(store, goa_trip, a, 50, [a])

    engine = SettlementEngine(store)
    assert engine.amount_owed_to_user(goa_trip, a) == []
    assert engine.amount_owed_by_user(goa_trip, a) == []


def test_opposite_debts_are_not_netted(store, users, goa_trip):
    a, b = users["a"], users["b"]
    add_expense(store, goa_trip, a, 20, [a, b])   # b owes a 10
    add_expense(store, goa_trip, b, 8, [a, b])    # a owes b 4

    engine = SettlementEngine(store)
    assert engine.amount_owed_to_user(goa_trip, a)[0]["amount"] == 10.0
    assert engine.amount_owed_by_user(goa_trip, a)[0]["amount"] == 4.0


def test_owed_amounts_accumulate_per_counterparty(store, users, goa_trip):
    a, b, c = users["a"], users["b"], users["c"]
    add_expense(store, goa_trip, a, 30, [a, b, c])
    add_expense(store, goa_trip, a, 10, [a, b])

    owed = SettlementEngine.owed_to(
        [Expense.from_document(d) for d in store.find_expenses({"trip_id": goa_trip})], a
    )
    assert owed == {b: Decimal("15"), c: Decimal("10")}


def test_owed_by_ignores_expenses_user_is_not_part_of(store, users, goa_trip):
    a, b, c = users["a"], users["b"], users["c"]
    add_expense(store, goa_trip, a, 90, [a, b])

    assert SettlementEngine(store).amount_owed_by_user(goa_trip, c) == []


def test_unknown_counterparty_shows_as_unknown(store, users, goa_trip):
    a, b = users["a"], users["b"]
    add_expense(store, goa_trip, a, 40, [a, b])
    store.delete_record(RecordKind.USERS, b)

    owed = SettlementEngine(store).amount_owed_to_user(goa_trip, a)
    assert owed == [{"user_id": b, "full_name": "Unknown", "avatar": None, "amount": 20.0}]


def test_net_balances_sum_to_zero(store, users, goa_trip):
    a, b, c = users["a"], users["b"], users["c"]
    add_expense(store, goa_trip, a, 100, [a, b, c])
    add_expense(store, goa_trip, b, 45, [b, c])

    balances = SettlementEngine(store).trip_balances(goa_trip)

    assert [row["user_id"] for row in balances] == [a, b, c]
    assert abs(sum(row["balance"] for row in balances)) < 0.02
    assert balances[0]["total_paid"] == 100.0


def test_empty_split_surfaces_as_computation_error():
    expense = Expense(
        id="e1", trip_id="t1", paid_by="a", amount=Decimal("10"),
        payment_date=datetime(2024, 1, 1), split_between=[],
    )
    with pytest.raises(ComputationError):
        SettlementEngine.owed_to([expense], "a")
