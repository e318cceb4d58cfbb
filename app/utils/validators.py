"""
Validators
==========

Common validation utilities for form input.
"""

import re
from typing import Optional
import uuid

from app.core.errors import ErrorCodes, ValidationError

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def clean_text(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; blank strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def require_text(
    value: Optional[str],
    message: str,
    field: str,
    code: str = ErrorCodes.VALIDATION_ERROR,
) -> str:
    """
    Return the stripped value or raise if it is missing or blank.

    Raises:
        ValidationError: If value is empty after stripping
    """
    cleaned = clean_text(value)
    if cleaned is None:
        raise ValidationError(message=message, field=field, code=code)
    return cleaned


def validate_email(email: Optional[str]) -> str:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        Validated email (stripped)

    Raises:
        ValidationError: If email is invalid
    """
    cleaned = require_text(email, "Email is required", "email")

    if not EMAIL_PATTERN.match(cleaned):
        raise ValidationError(
            message="Invalid email format",
            field="email",
        )

    return cleaned


def parse_uuid(value: Optional[str], message: str, field: str = "id", code: str = ErrorCodes.VALIDATION_ERROR) -> uuid.UUID:
    """
    Parse a UUID from form input.

    Raises:
        ValidationError: If the value is missing or not a UUID
    """
    cleaned = require_text(value, message, field, code)
    try:
        return uuid.UUID(cleaned)
    except ValueError:
        raise ValidationError(
            message="Invalid UUID format",
            field=field,
            code=code,
        )


def is_iso_date(value: str) -> bool:
    """True for strings shaped like ``YYYY-MM-DD``."""
    return bool(ISO_DATE_PATTERN.match(value))
