"""
Input validation utilities for booking data.
"""

import re
from typing import Any, Iterable, List, Mapping, Optional

from utils.exceptions import ValidationError


def validate_email(email: str) -> bool:
    """
    Validate email address format.

    Returns:
        True if valid format, False otherwise
    """
    if not email or not isinstance(email, str):
        return False

    # Basic email regex (RFC 5322 simplified)
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email.strip()))


def validate_card_last4(value: str) -> bool:
    """Card last-4 must be exactly four digits."""
    return isinstance(value, str) and bool(re.fullmatch(r"\d{4}", value.strip()))


def sanitize_text(text: str, max_length: Optional[int] = None) -> str:
    """
    Sanitize free-text input (notes, names).

    Control characters other than newlines and tabs are dropped and the
    result is trimmed.
    """
    if not text:
        return ""

    sanitized = re.sub(r'[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F]', '', str(text))
    sanitized = sanitized.strip()

    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized


def require_text(text: Optional[str], message: str, max_length: Optional[int] = None) -> str:
    """
    Return sanitized text or raise ValidationError when it is blank.
    """
    cleaned = sanitize_text(text or "", max_length=max_length)
    if not cleaned:
        raise ValidationError(message)
    return cleaned


def missing_fields(data: Mapping[str, Any], required: Iterable[str]) -> List[str]:
    """List required keys whose values are missing or blank."""
    missing = []
    for field in required:
        value = data.get(field)
        if value is None or str(value).strip() == "":
            missing.append(field)
    return missing
