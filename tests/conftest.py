import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from app.db import mongo
from app.main import app

UNIQUE_FIELDS = ("email", "phone")


def _matches(doc, query):
    for key, expected in query.items():
        if isinstance(expected, dict) and "$ne" in expected:
            if doc.get(key) == expected["$ne"]:
                return False
        elif doc.get(key) != expected:
            return False
    return True


class FakeUsersCollection:
    """
    In-memory stand-in for the Motor users collection, covering the
    calls the app makes.
    """

    def __init__(self):
        self.docs = []

    def _check_unique(self, candidate, skip_id=None):
        for doc in self.docs:
            if doc["_id"] == skip_id:
                continue
            for field in UNIQUE_FIELDS:
                if field in candidate and doc.get(field) == candidate[field]:
                    raise DuplicateKeyError(
                        f"E11000 duplicate key error index: {field}_unique",
                        11000,
                        {"keyPattern": {field: 1}, "keyValue": {field: candidate[field]}},
                    )

    async def find_one(self, query, projection=None):
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self._check_unique(doc)
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query, update):
        for doc in self.docs:
            if _matches(doc, query):
                changes = update.get("$set", {})
                self._check_unique(changes, skip_id=doc["_id"])
                modified = any(doc.get(k) != v for k, v in changes.items())
                doc.update(copy.deepcopy(changes))
                return SimpleNamespace(matched_count=1, modified_count=int(modified))
        return SimpleNamespace(matched_count=0, modified_count=0)


@pytest.fixture
def users_collection(monkeypatch):
    collection = FakeUsersCollection()
    monkeypatch.setattr(mongo, "_database", {mongo.USERS_COLLECTION: collection})
    return collection


@pytest.fixture
def client(users_collection):
    return TestClient(app)


@pytest.fixture
def registered(client):
    payload = {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "password": "s3cret-pass",
        "phone": "+15551234567",
    }
    response = client.post("/register", json=payload)
    assert response.status_code == 201
    return {**payload, **response.json()}
