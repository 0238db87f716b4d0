"""
app/api/deps.py

Purpose: Request helpers shared by the user routes

- Reads JSON or form bodies into a plain dict
- Extracts the access token from body, query or header
- Resolves the authenticated user
"""

import json
from typing import Any, Dict, Optional, Tuple

from fastapi import Request
from starlette.datastructures import UploadFile

from app.core.exceptions import BadRequestError, TokenMissingError
from app.services.user_service import get_user_from_token

TOKEN_HEADER = "x-access-token"
FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_payload(request: Request) -> Tuple[Dict[str, Any], Dict[str, UploadFile]]:
    """
    Parses the request body.
    
    Returns:
        (fields, files) where files holds uploaded files by field name
    
    Raises:
        BadRequestError: If the body is not a JSON object or valid form
    """
    content_type = request.headers.get("content-type", "")
    
    if content_type.startswith(FORM_TYPES):
        form = await request.form()
        fields: Dict[str, Any] = {}
        files: Dict[str, UploadFile] = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                files[key] = value
            else:
                fields[key] = value
        return fields, files
    
    body = await request.body()
    if not body.strip():
        return {}, {}
    
    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise BadRequestError() from e
    
    if not isinstance(payload, dict):
        raise BadRequestError()
    
    return payload, {}


async def extract_token(request: Request) -> Optional[str]:
    """
    Finds the access token: body `token`, then query `token`,
    then the x-access-token header.
    """
    try:
        payload, _ = await read_payload(request)
    except BadRequestError:
        payload = {}
    
    token = payload.get("token") or request.query_params.get("token") or request.headers.get(TOKEN_HEADER)
    if not token or not isinstance(token, str):
        return None
    return token


async def get_current_user(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency resolving the user behind the request's token.
    
    Raises:
        TokenMissingError: 403 when no token is present
        InvalidTokenError: 401 when the token does not verify
    """
    token = await extract_token(request)
    if not token:
        raise TokenMissingError()
    return await get_user_from_token(token)
