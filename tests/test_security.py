from __future__ import annotations

from datetime import timedelta

import pytest

from cooking_suggest.core import config
from cooking_suggest.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_hash_is_salted_and_verifiable():
    first = hash_password("hunter22")
    second = hash_password("hunter22")

    assert first != second
    assert first != "hunter22"
    assert verify_password("hunter22", first)
    assert not verify_password("hunter23", first)


def test_verify_password_rejects_garbage_hash():
    assert not verify_password("hunter22", "not-a-bcrypt-hash")


def test_token_round_trip():
    token = create_access_token(42, "ana")

    identity = decode_access_token(token)

    assert identity is not None
    assert identity.user_id == 42
    assert identity.username == "ana"


def test_expired_token_is_rejected():
    token = create_access_token(42, "ana", expires_in=timedelta(seconds=-5))

    assert decode_access_token(token) is None


def test_tampered_token_is_rejected():
    token = create_access_token(42, "ana")
    other = create_access_token(1, "admin")
    head, _, sig = token.split(".")
    # claims swapped in from another token, signature left as-is
    forged = ".".join([head, other.split(".")[1], sig])

    assert decode_access_token(forged) is None
    assert decode_access_token("not.a.token") is None


def test_token_from_another_secret_is_rejected(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(config, "JWT_SECRET", "first-secret-0123456789abcdef0123")
    token = create_access_token(1, "ana")

    monkeypatch.setattr(config, "JWT_SECRET", "second-secret-0123456789abcdef012")

    assert decode_access_token(token) is None
