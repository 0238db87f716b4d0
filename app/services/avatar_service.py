"""
app/services/avatar_service.py

Purpose: Avatar uploads

- Writes uploaded images under UPLOAD_DIR with a generated name
- Builds the public URL the file is served from
- Removes a stored avatar when the profile update is rejected
"""

import uuid
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import BadRequestError
from app.core.logging import get_logger

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


def build_avatar_url(scheme: str, filename: str) -> str:
    route = settings.UPLOADS_ROUTE.rstrip("/")
    return f"{scheme}://{settings.SERVER_URL}{route}/{filename}"


async def save_avatar(upload: UploadFile, scheme: str) -> str:
    """
    Stores an uploaded avatar and returns its public URL.
    
    At most MAX_AVATAR_BYTES + 1 bytes are read from the upload.
    
    Raises:
        BadRequestError: If the file is not an image or is too large
    """
    extension = Path(upload.filename or "").suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise BadRequestError("Avatar must be an image file")
    
    content = await upload.read(settings.MAX_AVATAR_BYTES + 1)
    if len(content) > settings.MAX_AVATAR_BYTES:
        raise BadRequestError("Avatar file is too large")
    
    upload_dir = Path(settings.UPLOAD_DIR)
    filename = f"{uuid.uuid4().hex}{extension}"
    
    def write():
        upload_dir.mkdir(parents=True, exist_ok=True)
        (upload_dir / filename).write_bytes(content)
    
    await run_in_threadpool(write)
    logger.info(f"Avatar stored as {filename} ({len(content)} bytes)")
    
    return build_avatar_url(scheme, filename)


async def discard_avatar(avatar_url: str) -> None:
    """
    Deletes the file behind an avatar URL produced by save_avatar.
    """
    filename = avatar_url.rsplit("/", 1)[-1]
    path = Path(settings.UPLOAD_DIR) / filename
    await run_in_threadpool(path.unlink, missing_ok=True)
    logger.info(f"Discarded avatar {filename}")
