"""
app/db/users.py

Purpose: User data access

- Insert, lookup and update against the users collection
- No business rules here; see app/services/user_service.py
"""

from bson import ObjectId
from bson.errors import InvalidId
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Union

from app.db.mongo import get_users_collection
from app.core.logging import get_logger

logger = get_logger(__name__)


def to_object_id(value: Union[str, ObjectId, None]) -> Optional[ObjectId]:
    """
    Converts a hex string to ObjectId; returns None for anything invalid.
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


async def insert_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Inserts a new user document.
    
    Returns:
        The stored document including its `_id`
    """
    users = get_users_collection()
    result = await users.insert_one(user)
    user["_id"] = result.inserted_id
    logger.info("User inserted", extra={"user_id": str(result.inserted_id)})
    return user


async def get_user_by_id(user_id: Union[str, ObjectId]) -> Optional[Dict[str, Any]]:
    oid = to_object_id(user_id)
    if oid is None:
        return None
    users = get_users_collection()
    return await users.find_one({"_id": oid})


async def find_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    users = get_users_collection()
    return await users.find_one({"email": email})


async def user_exists(query: Dict[str, Any]) -> bool:
    users = get_users_collection()
    return await users.find_one(query, projection={"_id": 1}) is not None


async def update_users(query: Dict[str, Any], fields: Dict[str, Any]) -> int:
    """
    Applies `$set` of the given fields to the matching user.
    
    Returns:
        Number of modified documents
    """
    users = get_users_collection()
    result = await users.update_one(
        query,
        {"$set": {**fields, "updated_at": datetime.now(timezone.utc)}}
    )
    logger.debug(f"Update matched={result.matched_count} modified={result.modified_count}")
    return result.modified_count
