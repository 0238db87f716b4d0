import time

import pytest
from bson import ObjectId

from app.core.config import settings
from app.core.exceptions import InvalidTokenError
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    make_password,
    verify_password,
)


def test_password_hash_is_salted():
    first_hash, first_salt = make_password("hunter2")
    second_hash, second_salt = make_password("hunter2")

    assert first_salt != second_salt
    assert first_hash != second_hash
    assert hash_password("hunter2", first_salt) == first_hash


def test_verify_password():
    hashed, salt = make_password("hunter2")

    assert verify_password("hunter2", hashed, salt)
    assert not verify_password("hunter3", hashed, salt)
    assert not verify_password("hunter2", "", salt)


def test_token_carries_identity_claims():
    user = {"_id": ObjectId(), "email": "jane@example.com", "phone": "+15551234567"}

    claims = decode_access_token(create_access_token(user))

    assert claims["_id"] == str(user["_id"])
    assert claims["email"] == user["email"]
    assert claims["phone"] == user["phone"]
    assert "exp" in claims


def test_tampered_token_is_rejected():
    token = create_access_token({"_id": ObjectId(), "email": "a@b.c", "phone": "1"})
    header, payload, signature = token.split(".")

    with pytest.raises(InvalidTokenError):
        decode_access_token(f"{header}.{payload}.{signature[::-1]}")


def test_token_expires_after_configured_hours():
    before = time.time()
    token = create_access_token({"_id": ObjectId(), "email": "a@b.c", "phone": "1"})

    lifetime = decode_access_token(token)["exp"] - before

    assert settings.TOKEN_EXPIRE_HOURS == 2
    assert abs(lifetime - settings.TOKEN_EXPIRE_HOURS * 3600) < 5
