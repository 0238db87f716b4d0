import json
from typing import Optional, Any


class AccountError(Exception):
    """
    Base exception for the accounts service.
    Rendered as an ERROR envelope by the registered exception handlers.
    """
    def __init__(self, message: str, status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class BadRequestError(AccountError):
    """
    Raised when the request body cannot be read.
    """
    def __init__(self, message: str = "Invalid request body", details: Optional[Any] = None):
        super().__init__(message, status_code=400, details=details)


class MissingParametersError(AccountError):
    """
    Raised when required fields are absent from the request body.
    """
    def __init__(self, missing: list):
        super().__init__(
            "Following parameters are required in the request body: " + _json_list(missing),
            status_code=400,
            details=missing
        )


class ConflictError(AccountError):
    """
    Raised when email or phone already belong to another user.
    """
    def __init__(self, conflicts: list):
        super().__init__(
            "Please check the error stack: " + _json_list(conflicts),
            status_code=400,
            details=conflicts
        )


class UserNotFoundError(AccountError):
    def __init__(self, message: str = "No user found with the given Email Id"):
        super().__init__(message, status_code=400)


class WrongPasswordError(AccountError):
    def __init__(self, message: str = "Wrong Password"):
        super().__init__(message, status_code=400)


class TokenMissingError(AccountError):
    """
    Raised when a request carries no access token at all.
    """
    def __init__(self, message: str = "No Token Found"):
        super().__init__(message, status_code=403)


class InvalidTokenError(AccountError):
    """
    Raised when an access token is malformed, expired or unknown.
    """
    def __init__(self, message: str = "Invalid Token"):
        super().__init__(message, status_code=401)


def _json_list(items: list) -> str:
    return json.dumps(items, separators=(",", ":"))
