import asyncio

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import ConflictError
from app.db import users as user_store
from app.services import user_service


def test_prepare_user_data_hashes_password():
    doc = user_service.prepare_user_data({
        "name": "Jane",
        "email": "JANE@example.com",
        "password": "pw",
        "phone": 5551234,
    })

    assert doc["email"] == "jane@example.com"
    assert doc["phone"] == "5551234"
    assert doc["password"] != "pw"
    assert doc["email_verified"] is False
    assert doc["phone_verified"] is False
    assert user_service.valid_password(doc, "pw")
    assert not user_service.valid_password(doc, "other")


def test_prepare_update_resets_only_changed_flags():
    user = {"_id": ObjectId(), "email": "jane@example.com", "phone": "123"}

    fields = user_service.prepare_update(user, {"email": "jane@example.com", "phone": "456"})

    assert fields == {"email": "jane@example.com", "phone": "456", "phone_verified": False}


def test_prepare_update_sets_avatar_and_rehashes_password():
    user = {"_id": ObjectId(), "email": "jane@example.com", "phone": "123"}

    fields = user_service.prepare_update(user, {"password": "new", "is_admin": True}, "http://x/a.png")

    assert fields["avatar"] == "http://x/a.png"
    assert "is_admin" not in fields
    assert user_service.valid_password(fields, "new")


def test_check_conflicts(users_collection):
    owner = ObjectId()
    users_collection.docs.append({"_id": owner, "email": "jane@example.com", "phone": "123"})

    conflicts = asyncio.run(user_service.check_conflicts({"email": "Jane@example.com", "phone": "999"}))
    assert conflicts == ["Email already exists"]

    own = asyncio.run(user_service.check_conflicts({"email": "jane@example.com", "phone": "123"}, exclude_id=owner))
    assert own == []


def test_duplicate_key_message_uses_key_pattern():
    email_clash = DuplicateKeyError(
        'E11000 duplicate key error index: email_unique dup key: { email: "phoneguy@example.com" }',
        11000,
        {"keyPattern": {"email": 1}, "keyValue": {"email": "phoneguy@example.com"}},
    )
    phone_clash = DuplicateKeyError("E11000", 11000, {"keyValue": {"phone": "+15550000000"}})

    assert user_service.duplicate_key_message(email_clash) == "Email already exists"
    assert user_service.duplicate_key_message(phone_clash) == "Phone already exists"


def test_register_race_reports_the_clashing_field(users_collection, monkeypatch):
    async def lost_race(user):
        raise DuplicateKeyError(
            'E11000 duplicate key error index: email_unique dup key: { email: "phoneguy@example.com" }',
            11000,
            {"keyPattern": {"email": 1}, "keyValue": {"email": "phoneguy@example.com"}},
        )

    monkeypatch.setattr(user_store, "insert_user", lost_race)

    with pytest.raises(ConflictError) as excinfo:
        asyncio.run(user_service.register_user({
            "name": "Phone Guy",
            "email": "phoneguy@example.com",
            "password": "pw",
            "phone": "+15551112222",
        }))

    assert excinfo.value.details == ["Email already exists"]


def test_prepare_user_data_uses_aware_timestamps():
    doc = user_service.prepare_user_data({"name": "A", "email": "a@b.c", "password": "pw", "phone": "1"})

    assert doc["created_at"].tzinfo is not None
