"""
Text validation and sanitization for user-entered profile fields.

Allowed characters are Latin letters, Turkish letters, digits, spaces and
common punctuation. Names are stricter: letters, spaces, hyphen and
apostrophe only. Emails are checked with email-validator.
"""

import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email

_TEXT_DISALLOWED = re.compile(r"[^A-Za-zÇĞİÖŞÜçğıöşü0-9 \-_'`.(),:;!?/\\]")
_NAME_DISALLOWED = re.compile(r"[^A-Za-zÇĞİÖŞÜçğıöşü \-']")


def sanitize_text(value: str) -> str:
    if not value:
        return ""
    return _TEXT_DISALLOWED.sub("", value)


def sanitize_name(value: str) -> str:
    if not value:
        return ""
    return _NAME_DISALLOWED.sub("", value)


def is_valid_text(value: str) -> bool:
    return value == sanitize_text(value)


def is_valid_name(value: str) -> bool:
    return value == sanitize_name(value)


def normalize_email(value: str) -> Optional[str]:
    """Normalized address, or None when it is not a valid email. No DNS lookups."""
    if not value:
        return None
    try:
        return validate_email(value, check_deliverability=False).normalized
    except EmailNotValidError:
        return None


def is_valid_email(value: str) -> bool:
    return normalize_email(value) is not None


def is_company_email(value: str, domain: str) -> bool:
    """True when the address belongs to ``domain`` (exact match, case-insensitive)."""
    normalized = normalize_email(value)
    if normalized is None:
        return False
    return normalized.rsplit("@", 1)[1].lower() == domain.lower()
