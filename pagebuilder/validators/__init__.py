"""
pagebuilder.validators - Validation Engine
"""

from .taxonomy import (
    ValidationError,
    SECTION_FIELD,
    get_field_errors,
    has_field_error,
    format_errors,
)
from .registry import RuleContext, register_rules, get_rules, registered_types
from .engine import validate_section, is_valid, GENERIC_FAILURE_MESSAGE
from . import checks

__all__ = [
    "ValidationError",
    "SECTION_FIELD",
    "get_field_errors",
    "has_field_error",
    "format_errors",
    "RuleContext",
    "register_rules",
    "get_rules",
    "registered_types",
    "validate_section",
    "is_valid",
    "GENERIC_FAILURE_MESSAGE",
    "checks",
]
