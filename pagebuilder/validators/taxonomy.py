"""
validators/taxonomy.py - Validation error type and helpers

Validation errors are values, never exceptions: a validation pass returns a
fresh list and an empty list means the draft may be saved.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List


# Field name used when a failure cannot be attributed to a single field
SECTION_FIELD = "section"


@dataclass(frozen=True)
class ValidationError:
    """A single validation failure."""

    field: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "message": self.message}

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


def get_field_errors(errors: Iterable[ValidationError], field: str) -> List[ValidationError]:
    """Errors reported against one field."""
    return [e for e in errors if e.field == field]


def has_field_error(errors: Iterable[ValidationError], field: str) -> bool:
    return any(e.field == field for e in errors)


def format_errors(errors: Iterable[ValidationError]) -> str:
    """One line per error, for logs and CLI output."""
    return "\n".join(str(e) for e in errors)
