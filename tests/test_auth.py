# tests/test_auth.py
from datetime import datetime, timedelta, timezone

import pytest

from dealership import auth, crud
from dealership.models import ROLE_ADMIN


def test_password_hash_round_trip():
    stored = auth.hash_password("secret123")
    assert stored.startswith("$pbkdf2-sha256$")
    assert auth.hash_password("secret123") != stored
    assert auth.verify_password("secret123", stored)
    assert not auth.verify_password("wrong", stored)
    assert not auth.verify_password("secret123", "garbage")


def test_sign_up_requires_name_and_unique_email(db):
    with pytest.raises(auth.AuthError, match="full name"):
        auth.sign_up(db, "a@example.com", "secret123", "   ")
    auth.sign_up(db, "a@example.com", "secret123", "Ann")
    with pytest.raises(auth.AuthError, match="already exists"):
        auth.sign_up(db, "A@example.com", "secret123", "Ann Again")


def test_sign_in_and_resolve_context(db):
    auth.sign_up(db, "a@example.com", "secret123", "Ann")
    with pytest.raises(auth.AuthError, match="Invalid email or password"):
        auth.sign_in(db, "a@example.com", "nope")

    user, session = auth.sign_in(db, "a@example.com", "secret123")
    context = auth.resolve_session(db, session.token)
    assert context.user.id == user.id
    assert context.is_admin is False


def test_admin_flag_comes_from_role(db):
    auth.sign_up(db, "boss@example.com", "secret123", "Boss")
    crud.set_role(db, "boss@example.com", ROLE_ADMIN)
    _, session = auth.sign_in(db, "boss@example.com", "secret123")
    assert auth.resolve_session(db, session.token).is_admin is True


def test_expired_or_unknown_session_resolves_to_none(db):
    user = auth.sign_up(db, "a@example.com", "secret123", "Ann")
    crud.create_session(db, user.id, "old", datetime.now(timezone.utc) - timedelta(minutes=1))
    assert auth.resolve_session(db, "old") is None
    assert crud.get_session(db, "old") is None
    assert auth.resolve_session(db, "missing") is None
    assert auth.resolve_session(db, None) is None


def test_sign_out_drops_all_sessions(db):
    auth.sign_up(db, "a@example.com", "secret123", "Ann")
    user, first = auth.sign_in(db, "a@example.com", "secret123")
    _, second = auth.sign_in(db, "a@example.com", "secret123")
    auth.sign_out(db, user)
    assert auth.resolve_session(db, first.token) is None
    assert auth.resolve_session(db, second.token) is None
