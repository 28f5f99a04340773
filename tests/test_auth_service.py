"""Tests for password hashing and the session lifecycle."""
import time
from datetime import timedelta

import pytest
from jose import jwt

from companion_chat.services.auth_service import (
    AuthService,
    AuthenticationError,
    hash_password,
    verify_password,
)
from companion_chat.storage import DuplicateUsernameError, MemoryStorage
from companion_chat.utils.clock import utcnow


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def auth(memory_storage):
    return AuthService(memory_storage, secret="unit-test-secret", session_max_age_seconds=3600)


def test_hash_password_format():
    stored = hash_password("hunter2")

    digest, salt = stored.split(".")
    assert len(digest) == 128  # 64-byte key, hex encoded
    assert len(salt) == 32


def test_hash_password_uses_fresh_salt():
    assert hash_password("hunter2") != hash_password("hunter2")


def test_verify_password():
    stored = hash_password("hunter2")

    assert verify_password("hunter2", stored)
    assert not verify_password("hunter3", stored)
    assert not verify_password("", stored)


def test_verify_password_rejects_malformed_hash():
    assert not verify_password("hunter2", "not-a-hash")
    assert not verify_password("hunter2", "zz.salt")


def test_register_stores_hash_not_password(auth, memory_storage):
    user = auth.register("alice", "hunter2")

    assert memory_storage.get_user(user.id).password_hash != "hunter2"
    assert verify_password("hunter2", user.password_hash)


def test_register_duplicate_raises(auth):
    auth.register("alice", "hunter2")

    with pytest.raises(DuplicateUsernameError):
        auth.register("ALICE", "other")


def test_authenticate(auth):
    user = auth.register("alice", "hunter2")

    assert auth.authenticate("alice", "hunter2").id == user.id
    with pytest.raises(AuthenticationError):
        auth.authenticate("alice", "wrong")
    with pytest.raises(AuthenticationError):
        auth.authenticate("bob", "hunter2")


def test_session_round_trip(auth):
    user = auth.register("alice", "hunter2")

    issued = auth.start_session(user)

    assert issued.max_age == 3600
    assert auth.resolve_session(issued.cookie_value).id == user.id


def test_cookie_carries_user_and_session(auth):
    user = auth.register("alice", "hunter2")
    issued = auth.start_session(user)

    claims = jwt.decode(issued.cookie_value, "unit-test-secret", algorithms=["HS256"])

    assert claims["sub"] == str(user.id)
    assert claims["sid"] == issued.token


def test_resolve_rejects_missing_cookie(auth):
    with pytest.raises(AuthenticationError):
        auth.resolve_session(None)
    with pytest.raises(AuthenticationError):
        auth.resolve_session("")


def test_resolve_rejects_cookie_signed_with_other_secret(auth, memory_storage):
    user = auth.register("alice", "hunter2")
    issued = auth.start_session(user)
    forger = AuthService(memory_storage, secret="someone-else", session_max_age_seconds=3600)

    with pytest.raises(AuthenticationError):
        forger.resolve_session(issued.cookie_value)


def test_resolve_rejects_session_owned_by_other_user(auth, memory_storage):
    alice = auth.register("alice", "hunter2")
    bob = auth.register("bob", "hunter2")
    issued = auth.start_session(alice)
    forged = jwt.encode(
        {"sub": str(bob.id), "sid": issued.token, "exp": utcnow() + timedelta(hours=1)},
        "unit-test-secret",
        algorithm="HS256",
    )

    with pytest.raises(AuthenticationError):
        auth.resolve_session(forged)


def test_expired_cookie_is_rejected_and_its_session_removed(memory_storage):
    short_lived = AuthService(memory_storage, secret="unit-test-secret", session_max_age_seconds=1)
    user = short_lived.register("alice", "hunter2")
    issued = short_lived.start_session(user)

    time.sleep(2)

    with pytest.raises(AuthenticationError, match="expired"):
        short_lived.resolve_session(issued.cookie_value)
    assert issued.token not in memory_storage.sessions


def test_logout_with_expired_cookie_removes_session(memory_storage):
    short_lived = AuthService(memory_storage, secret="unit-test-secret", session_max_age_seconds=1)
    user = short_lived.register("alice", "hunter2")
    issued = short_lived.start_session(user)

    time.sleep(2)
    short_lived.end_session(issued.cookie_value)

    assert memory_storage.get_session(issued.token) is None


def test_expired_cookie_from_other_secret_leaves_sessions_alone(auth, memory_storage):
    user = auth.register("alice", "hunter2")
    issued = auth.start_session(user)
    forged = jwt.encode(
        {"sub": str(user.id), "sid": issued.token, "exp": utcnow() - timedelta(hours=1)},
        "someone-else",
        algorithm="HS256",
    )

    with pytest.raises(AuthenticationError):
        auth.resolve_session(forged)
    assert memory_storage.get_session(issued.token) is not None


def test_starting_a_session_sweeps_expired_ones(memory_storage):
    stale = AuthService(memory_storage, secret="unit-test-secret", session_max_age_seconds=-60)
    fresh = AuthService(memory_storage, secret="unit-test-secret", session_max_age_seconds=3600)
    user = fresh.register("alice", "hunter2")
    abandoned = stale.start_session(user)

    current = fresh.start_session(user)

    assert set(memory_storage.sessions) == {current.token}
    assert abandoned.token not in memory_storage.sessions


def test_end_session(auth, memory_storage):
    user = auth.register("alice", "hunter2")
    issued = auth.start_session(user)

    auth.end_session(issued.cookie_value)

    assert memory_storage.get_session(issued.token) is None
    with pytest.raises(AuthenticationError):
        auth.resolve_session(issued.cookie_value)


def test_end_session_ignores_garbage(auth):
    auth.end_session(None)
    auth.end_session("not-a-jwt")
