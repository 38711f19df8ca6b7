"""
validators/checks.py - Reusable field checks

Each check returns a ValidationError or None. Empty values pass every check
except required(); callers combine required() with a format check when a
field is mandatory.
"""

from __future__ import annotations
from typing import Any, Iterable, Optional
from urllib.parse import urlparse
import math
import re

from .taxonomy import ValidationError


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def is_valid_url(value: str) -> bool:
    """Accept http(s) URLs, site-relative paths and inline image data."""
    if value.startswith("data:image/") or value.startswith("/"):
        return True
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def required(value: Any, field: str, label: str) -> Optional[ValidationError]:
    if _is_empty(value):
        return ValidationError(field, f"{label} is required")
    return None


def max_length(value: Any, limit: int, field: str, label: str) -> Optional[ValidationError]:
    if isinstance(value, str) and len(value) > limit:
        return ValidationError(field, f"{label} must be no more than {limit} characters")
    return None


def url(value: Any, field: str, label: str) -> Optional[ValidationError]:
    if _is_empty(value):
        return None
    if not isinstance(value, str) or not is_valid_url(value):
        return ValidationError(field, f"{label} must be a valid URL")
    return None


def email(value: Any, field: str, label: str) -> Optional[ValidationError]:
    if _is_empty(value):
        return None
    if not isinstance(value, str) or not is_valid_email(value):
        return ValidationError(field, f"{label} must be a valid email address")
    return None


def number_range(
    value: Any,
    minimum: float,
    maximum: float,
    field: str,
    label: str,
) -> Optional[ValidationError]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        return ValidationError(field, f"{label} must be a valid number")
    if value < minimum or value > maximum:
        return ValidationError(field, f"{label} must be between {minimum} and {maximum}")
    return None


def one_of(value: Any, allowed: Iterable[Any], field: str, label: str) -> Optional[ValidationError]:
    allowed = list(allowed)
    if value is None or value in allowed:
        return None
    choices = ", ".join(str(a) for a in allowed)
    return ValidationError(field, f"{label} must be one of: {choices}")
