"""
Input sanitization helpers.

Every helper is total: it never raises on bad input. String helpers fall back
to ``""``, typed helpers (email, phone, date, id, ...) fall back to ``None``.
Callers decide whether a fallback value is an error.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Iterable, Optional
from urllib.parse import urlsplit

import nh3
from email_validator import EmailNotValidError, validate_email

DEFAULT_TEXT_LIMIT = 5000

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_PHONE_STRIP_RE = re.compile(r"[^\d+]")
_ENROLLMENT_STRIP_RE = re.compile(r"[^a-zA-Z0-9\-_]")
_APPLICATION_STRIP_RE = re.compile(r"[^a-zA-Z0-9\-]")
_USERNAME_STRIP_RE = re.compile(r"[^a-zA-Z0-9\-_@.]")


def sanitize_string(value) -> str:
    """Trim and drop every HTML tag. Non-strings become ``""``."""
    if not value or not isinstance(value, str):
        return ""
    return nh3.clean(value.strip(), tags=set()).strip()


def sanitize_text(value, max_length: int = DEFAULT_TEXT_LIMIT) -> str:
    """Like :func:`sanitize_string`, truncated to ``max_length``."""
    cleaned = sanitize_string(value)
    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length]
    return cleaned


def sanitize_email(value) -> Optional[str]:
    if not value or not isinstance(value, str):
        return None
    candidate = value.strip().lower()
    try:
        result = validate_email(candidate, check_deliverability=False)
    except EmailNotValidError:
        return None
    return result.normalized


def sanitize_phone(value) -> Optional[str]:
    """
    Keep digits and at most one leading ``+``.

    ``"+91 98-765 43210"`` becomes ``"+919876543210"``. The result must hold
    10 to 15 digits. Feeding the output back in returns it unchanged.
    """
    if not value or not isinstance(value, str):
        return None
    cleaned = _PHONE_STRIP_RE.sub("", value.strip())
    digits = cleaned.replace("+", "")
    if "+" in cleaned:
        cleaned = "+" + digits
    if len(digits) < 10 or len(digits) > 15:
        return None
    return cleaned


def _restricted(value, pattern: re.Pattern, max_length: int) -> Optional[str]:
    if not value or not isinstance(value, str):
        return None
    cleaned = pattern.sub("", value.strip())
    if not cleaned or len(cleaned) > max_length:
        return None
    return cleaned


def sanitize_enrollment_no(value) -> Optional[str]:
    return _restricted(value, _ENROLLMENT_STRIP_RE, 50)


def sanitize_application_no(value) -> Optional[str]:
    return _restricted(value, _APPLICATION_STRIP_RE, 30)


def sanitize_username(value) -> Optional[str]:
    return _restricted(value, _USERNAME_STRIP_RE, 100)


def sanitize_date(value) -> Optional[date]:
    """Strict ``YYYY-MM-DD``; impossible dates (2024-02-30) are rejected."""
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    candidate = value.strip()
    if not _DATE_RE.match(candidate):
        return None
    try:
        return date.fromisoformat(candidate)
    except ValueError:
        return None


def sanitize_id(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if not isinstance(value, str):
        return None
    candidate = value.strip()
    if not candidate.isdigit():
        return None
    parsed = int(candidate)
    return parsed if parsed > 0 else None


def sanitize_enum(value, allowed_values: Iterable[str]) -> Optional[str]:
    if not value or not isinstance(value, str):
        return None
    candidate = value.strip()
    if candidate not in set(allowed_values):
        return None
    return candidate


def sanitize_url(value) -> Optional[str]:
    if not value or not isinstance(value, str):
        return None
    candidate = value.strip()
    parts = urlsplit(candidate)
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        return None
    return candidate
