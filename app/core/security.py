"""
app/core/security.py

Purpose: Credentials

- Salted PBKDF2 password hashing and verification
- Signed access tokens (JWT) with a bounded lifetime
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple

from jose import JWTError, jwt

from app.core.config import settings
from app.core.exceptions import InvalidTokenError

SALT_BYTES = 16
HASH_BYTES = 64


def generate_salt() -> str:
    return secrets.token_hex(SALT_BYTES)


def hash_password(password: str, salt: str) -> str:
    """
    Derives the stored password digest (PBKDF2-HMAC-SHA512, hex encoded).
    """
    digest = hashlib.pbkdf2_hmac(
        "sha512",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        settings.PASSWORD_HASH_ITERATIONS,
        dklen=HASH_BYTES,
    )
    return digest.hex()


def make_password(password: str) -> Tuple[str, str]:
    """
    Returns a (hash, salt) pair for a new password.
    """
    salt = generate_salt()
    return hash_password(password, salt), salt


def verify_password(password: str, hashed: str, salt: str) -> bool:
    if not hashed or not salt:
        return False
    return hmac.compare_digest(hash_password(password, salt), hashed)


def create_access_token(user: Dict[str, Any]) -> str:
    """
    Signs a token asserting the user's identity.
    
    Payload: {email, phone, _id, exp}; expires after TOKEN_EXPIRE_HOURS.
    """
    expires_at = datetime.now(timezone.utc) + timedelta(hours=settings.TOKEN_EXPIRE_HOURS)
    claims = {
        "email": user.get("email"),
        "phone": user.get("phone"),
        "_id": str(user["_id"]),
        "exp": expires_at,
    }
    return jwt.encode(claims, settings.TOKEN_KEY, algorithm=settings.TOKEN_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verifies signature and expiry and returns the token claims.
    
    Raises:
        InvalidTokenError: For any malformed, tampered or expired token
    """
    try:
        claims = jwt.decode(token, settings.TOKEN_KEY, algorithms=[settings.TOKEN_ALGORITHM])
    except JWTError as e:
        raise InvalidTokenError() from e
    
    if not claims.get("_id"):
        raise InvalidTokenError()
    
    return claims
