"""Shared test fixtures for TripSplit."""

from datetime import datetime

import pytest
from flask_jwt_extended import create_access_token

from tripsplit import create_app
from tripsplit.config import TestConfig
from tripsplit.ledger import MemoryLedgerStore, RecordKind


def add_user(store, username, full_name=None, avatar=None):
    return store.create_record(RecordKind.USERS, {
        "username": username,
        "email": f"{username}@tripmail.io",
        "full_name": full_name or username.title(),
        "avatar": avatar,
        "password_hash": "not-a-real-hash",
    })


def add_trip(store, creator, members=None, start=datetime(2024, 5, 1), end=datetime(2024, 5, 4),
             name="Goa Trip", itinerary=None, planned_budget=None):
    return store.create_record(RecordKind.TRIPS, {
        "trip_name": name,
        "trip_desc": "Beaches and forts",
        "start_date": start,
        "end_date": end,
        "created_by": creator,
        "trip_members": members or [creator],
        "itinerary": itinerary or [],
        "planned_budget": planned_budget,
        "notes": "",
    })


def add_expense(store, trip_id, paid_by, amount, split_between, payment_date=datetime(2024, 5, 2),
                category="food", paid_to="Beach Shack"):
    return store.create_record(RecordKind.EXPENSES, {
        "trip_id": trip_id,
        "paid_by": paid_by,
        "amount": amount,
        "payment_date": payment_date,
        "split_between": split_between,
        "category": category,
        "description": "",
        "paid_to": paid_to,
    })


@pytest.fixture
def store():
    return MemoryLedgerStore()


@pytest.fixture
def users(store):
    """Three registered users keyed a, b, c."""
    return {
        "a": add_user(store, "asha", "Asha Rao"),
        "b": add_user(store, "bilal", "Bilal Khan"),
        "c": add_user(store, "chen", "Chen Li"),
    }


@pytest.fixture
def goa_trip(store, users):
    return add_trip(store, users["a"], members=[users["a"], users["b"], users["c"]])


@pytest.fixture
def app(store):
    app = create_app(TestConfig, store=store)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    """Build Authorization headers for a user id."""
    def _headers(user_id):
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}"}
    return _headers
