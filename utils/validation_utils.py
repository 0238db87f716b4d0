"""
utils/validation_utils.py

Purpose: Input validation

- Required-field checks on request payloads
- Email and phone normalisation
- Input sanitization
"""

import re
from typing import Any, Iterable, List, Mapping


def compare_params(required: Iterable[str], payload: Mapping[str, Any]) -> List[str]:
    """
    Lists the required field names absent from a payload.
    
    Only key presence counts; an empty value still satisfies the check.
    
    Args:
        required: Field names in the order they should be reported
        payload: Parsed request body
    
    Returns:
        Missing field names, in the order given by `required`
    """
    keys = set(payload.keys())
    return [name for name in required if name not in keys]


def normalize_email(email: Any) -> str:
    """
    Trims and lower-cases an email address for storage and lookup.
    """
    if email is None:
        return ""
    return str(email).strip().lower()


def normalize_phone(phone: Any) -> str:
    """
    Strips spaces, dashes and parentheses from a phone number.
    A leading '+' is kept.
    
    Args:
        phone: Phone number as string or number
    
    Returns:
        Normalised phone string
    """
    if phone is None:
        return ""
    return re.sub(r"[\s\-\(\)]", "", str(phone))


def sanitize_input(text: Any, max_length: int = 200) -> str:
    """
    Sanitizes free-text input such as display names.
    
    Args:
        text: Input text
        max_length: Maximum allowed length
    
    Returns:
        Sanitized text
    """
    if not text:
        return ""
    
    text = str(text)[:max_length]
    
    # Remove potentially dangerous characters
    text = re.sub(r"[<>{}\[\]]", "", text)
    
    # Normalize whitespace
    text = " ".join(text.split())
    
    return text.strip()
