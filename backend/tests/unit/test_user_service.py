"""Unit tests for accounts and user search."""

import pytest

from tripsplit.core.user_service import UserService
from tripsplit.errors import ConflictError, NotFoundError


def test_register_lowercases_username(store):
    user = UserService(store).register("Asha", "Asha@TripMail.io", "Asha Rao", "hash")
    assert user.username == "asha"
    assert user.email == "asha@tripmail.io"
    assert store.find_user(user.id)["password_hash"] == "hash"


def test_register_rejects_taken_username_or_email(store):
    users = UserService(store)
    users.register("asha", "asha@tripmail.io", "Asha Rao", "hash")

    with pytest.raises(ConflictError):
        users.register("ASHA", "other@tripmail.io", "Other", "hash")
    with pytest.raises(ConflictError):
        users.register("other", "asha@tripmail.io", "Other", "hash")


def test_find_by_login_accepts_username_or_email(store):
    users = UserService(store)
    user = users.register("asha", "asha@tripmail.io", "Asha Rao", "hash")

    assert users.find_by_login("Asha")["_id"] == user.id
    assert users.find_by_login("asha@tripmail.io")["_id"] == user.id
    assert users.find_by_login("") is None


def test_public_profile_has_no_credentials(store):
    users = UserService(store)
    user = users.register("asha", "asha@tripmail.io", "Asha Rao", "hash")
    assert "password_hash" not in users.get_user(user.id).to_public()


def test_refresh_token_tracking(store):
    users = UserService(store)
    user = users.register("asha", "asha@tripmail.io", "Asha Rao", "hash")

    users.set_refresh_token(user.id, "jti-1")
    assert users.refresh_token_matches(user.id, "jti-1")

    users.set_refresh_token(user.id, None)
    assert not users.refresh_token_matches(user.id, "jti-1")


def test_search_excludes_caller(store):
    users = UserService(store)
    asha = users.register("asha", "asha@tripmail.io", "Asha Rao", "hash")
    users.register("ashok", "ashok@tripmail.io", "Ashok Menon", "hash")

    found = users.search("ash", exclude=asha.id)

    assert [u["username"] for u in found] == ["ashok"]
    assert users.search("  ") == []


def test_unknown_user(store):
    with pytest.raises(NotFoundError):
        UserService(store).get_user("65f1c0a2b3c4d5e6f7a8b9c0")
