"""
app/api/users.py

Purpose: User account endpoints

- POST /register  → create a user, returns user + token (201)
- POST /login     → check credentials, returns user + token
- GET  /self      → resolve the token's user
- PUT  /update    → update profile fields and optional avatar
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.api.deps import get_current_user, read_payload
from app.core.exceptions import MissingParametersError
from app.core.logging import get_logger
from app.schemas.response import Info, ResponseType
from app.schemas.user import AuthResponse, UserPublic
from app.services import avatar_service, user_service
from utils.validation_utils import compare_params

logger = get_logger(__name__)
router = APIRouter()

REGISTER_PARAMS = ["name", "email", "password", "phone"]
LOGIN_PARAMS = ["email", "password"]


def require_params(required: list, payload: Dict[str, Any]) -> None:
    missing = compare_params(required, payload)
    if missing:
        raise MissingParametersError(missing)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: Request):
    payload, _ = await read_payload(request)
    require_params(REGISTER_PARAMS, payload)
    
    user, token = await user_service.register_user(payload)
    body = AuthResponse(user=UserPublic.from_document(user), token=token)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=body.to_json())


@router.post("/login")
async def login(request: Request):
    payload, _ = await read_payload(request)
    require_params(LOGIN_PARAMS, payload)
    
    user, token = await user_service.authenticate(payload["email"], payload["password"])
    body = AuthResponse(user=UserPublic.from_document(user), token=token)
    return body.to_json()


@router.get("/self")
async def verify_token(user: Dict[str, Any] = Depends(get_current_user)):
    """
    Returns the user the presented token belongs to.
    Token is read from body `token`, query `token` or the x-access-token header.
    """
    return UserPublic.from_document(user).to_json()


@router.put("/update")
async def update_user(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    payload, files = await read_payload(request)
    
    # Reject conflicts before anything is written to disk
    await user_service.ensure_no_conflicts(payload, exclude_id=user["_id"])
    
    avatar_url = None
    if "avatar" in files:
        avatar_url = await avatar_service.save_avatar(files["avatar"], request.url.scheme)
    
    try:
        await user_service.update_user(user, payload, avatar_url)
    except Exception:
        if avatar_url:
            await avatar_service.discard_avatar(avatar_url)
        raise
    
    info = Info(code=200, message="User details updated successfully.", type=ResponseType.INFO)
    return JSONResponse(status_code=info.code, content=info.as_dict())
