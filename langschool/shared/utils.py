"""Shared utility functions."""

from __future__ import annotations

import re
import unicodedata
from datetime import datetime, timezone

from email_validator import EmailNotValidError, validate_email

from langschool.shared.exceptions import ValidationException

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9]+")


def utc_now() -> datetime:
    """Return aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Normalize datetime to UTC timezone."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def normalize_email(raw_email: str) -> str:
    """Validate an email address and return its lower-cased form."""
    candidate = (raw_email or "").strip()
    try:
        validated = validate_email(candidate, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationException(f"Invalid email address: {candidate!r}") from exc
    return validated.normalized.lower()


def slugify(value: str) -> str:
    """Build URL slug from free text (ASCII only)."""
    ascii_value = (
        unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii").lower()
    )
    return _SLUG_STRIP_RE.sub("-", ascii_value).strip("-")
