"""
app/services/user_service.py

Purpose: User business rules

- Conflict checks on email and phone
- Mapping raw input into persistable user records
- Registration, login and profile update flows
- Resolving the user behind an access token
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Tuple

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import (
    ConflictError,
    InvalidTokenError,
    UserNotFoundError,
    WrongPasswordError,
)
from app.core.logging import get_logger, LogContext
from app.core.security import create_access_token, decode_access_token, make_password, verify_password
from app.db import users as user_store
from utils.validation_utils import normalize_email, normalize_phone, sanitize_input

logger = get_logger(__name__)


async def check_conflicts(payload: Dict[str, Any], exclude_id: Optional[ObjectId] = None) -> List[str]:
    """
    Reports email/phone values already owned by another user.
    
    Args:
        payload: Raw request body; only `email` and `phone` are inspected
        exclude_id: User allowed to own the values (the caller on update)
    
    Returns:
        List of conflict messages, empty when there is none
    """
    errors = []
    checks = (
        ("email", normalize_email, "Email already exists"),
        ("phone", normalize_phone, "Phone already exists"),
    )
    
    for field, normalize, message in checks:
        if not payload.get(field):
            continue
        query: Dict[str, Any] = {field: normalize(payload[field])}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        if await user_store.user_exists(query):
            errors.append(message)
    
    return errors


async def ensure_no_conflicts(payload: Dict[str, Any], exclude_id: Optional[ObjectId] = None) -> None:
    """
    Raises ConflictError when check_conflicts reports anything.
    """
    errors = await check_conflicts(payload, exclude_id=exclude_id)
    if errors:
        raise ConflictError(errors)


def duplicate_key_message(error: DuplicateKeyError) -> str:
    """
    Maps a unique-index violation to its conflict message using the
    server-reported key pattern, not the error text.
    """
    details = error.details or {}
    keys = details.get("keyPattern") or details.get("keyValue") or {}
    if "phone" in keys:
        return "Phone already exists"
    return "Email already exists"


def prepare_user_data(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Builds a new user document from a registration payload.
    The plain password is replaced by a salted hash.
    """
    hashed, salt = make_password(str(payload["password"]))
    now = datetime.now(timezone.utc)
    return {
        "name": sanitize_input(payload["name"]),
        "email": normalize_email(payload["email"]),
        "phone": normalize_phone(payload["phone"]),
        "password": hashed,
        "salt": salt,
        "email_verified": False,
        "phone_verified": False,
        "avatar": None,
        "created_at": now,
        "updated_at": now,
    }


def valid_password(user: Dict[str, Any], password: Any) -> bool:
    return verify_password(str(password), user.get("password", ""), user.get("salt", ""))


def prepare_update(
    user: Dict[str, Any],
    payload: Dict[str, Any],
    avatar_url: Optional[str] = None
) -> Dict[str, Any]:
    """
    Maps a profile update payload to the fields to `$set`.
    
    Unknown fields are ignored. Changing email or phone resets the
    matching verification flag.
    """
    fields: Dict[str, Any] = {}
    
    if "name" in payload:
        fields["name"] = sanitize_input(payload["name"])
    
    if payload.get("email"):
        email = normalize_email(payload["email"])
        fields["email"] = email
        if email != user.get("email"):
            fields["email_verified"] = False
    
    if payload.get("phone"):
        phone = normalize_phone(payload["phone"])
        fields["phone"] = phone
        if phone != user.get("phone"):
            fields["phone_verified"] = False
    
    if payload.get("password"):
        fields["password"], fields["salt"] = make_password(str(payload["password"]))
    
    if avatar_url:
        fields["avatar"] = avatar_url
    
    return fields


async def register_user(payload: Dict[str, Any]) -> Tuple[Dict[str, Any], str]:
    """
    Creates a user and issues an access token.
    
    Raises:
        ConflictError: If email or phone is already taken
    """
    await ensure_no_conflicts(payload)
    
    user = prepare_user_data(payload)
    try:
        saved = await user_store.insert_user(user)
    except DuplicateKeyError as e:
        # Lost a race against a concurrent registration
        raise ConflictError([duplicate_key_message(e)]) from e
    
    logger.info("User registered", extra={"user_id": str(saved["_id"]), "email": saved["email"]})
    return saved, create_access_token(saved)


async def authenticate(email: Any, password: Any) -> Tuple[Dict[str, Any], str]:
    """
    Checks credentials and issues an access token.
    
    Raises:
        UserNotFoundError: If no user has this email
        WrongPasswordError: If the password does not match
    """
    email = normalize_email(email)
    with LogContext(email=email):
        user = await user_store.find_user_by_email(email)
        if not user:
            logger.info("Login for unknown email")
            raise UserNotFoundError()
        
        if not valid_password(user, password):
            logger.warning("Login with wrong password", extra={"user_id": str(user["_id"])})
            raise WrongPasswordError()
        
        return user, create_access_token(user)


async def get_user_from_token(token: str) -> Dict[str, Any]:
    """
    Resolves the user a token was issued for.
    
    Raises:
        InvalidTokenError: If the token is invalid or its user no longer exists
    """
    claims = decode_access_token(token)
    user = await user_store.get_user_by_id(claims["_id"])
    if not user:
        raise InvalidTokenError()
    return user


async def update_user(
    user: Dict[str, Any],
    payload: Dict[str, Any],
    avatar_url: Optional[str] = None
) -> int:
    """
    Applies a profile update for the given user.
    
    Raises:
        ConflictError: If the new email or phone belongs to another user
    """
    with LogContext(user_id=str(user["_id"])):
        await ensure_no_conflicts(payload, exclude_id=user["_id"])
        
        fields = prepare_update(user, payload, avatar_url)
        if not fields:
            logger.info("Profile update with nothing to change")
            return 0
        
        try:
            modified = await user_store.update_users({"_id": user["_id"]}, fields)
        except DuplicateKeyError as e:
            raise ConflictError([duplicate_key_message(e)]) from e
        
        logger.info(f"Profile updated: {sorted(fields)}")
        return modified
