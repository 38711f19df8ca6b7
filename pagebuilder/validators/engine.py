"""
validators/engine.py - Section validation engine

validate_section() is pure, synchronous and total: it never raises. It runs
two passes over the active settings of a section:

1. Schema pass: the settings are parsed with the variant's pydantic model,
   type mismatches become ValidationErrors.
2. Rule pass: the registered rules for the type check required fields,
   formats, lengths and ranges.

Rule errors on a field that already failed the schema pass are dropped so
each field reports one problem at a time.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Union
import logging

from pydantic import ValidationError as PydanticValidationError

from pagebuilder.core.enums import parse_section_type, settings_key_for
from pagebuilder.core.section import SectionLike, thaw
from pagebuilder.core.settings import active_settings, settings_model_for

from . import rules as _rules  # noqa: F401  (registers the built-in rules)
from .registry import RuleContext, get_rules
from .taxonomy import SECTION_FIELD, ValidationError

logger = logging.getLogger("pagebuilder.validators")


GENERIC_FAILURE_MESSAGE = "This section could not be validated. Please review its settings and try again."


def _schema_errors(key: str, exc: PydanticValidationError) -> List[ValidationError]:
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        field = f"{key}.{loc}" if loc else key
        errors.append(ValidationError(field, err.get("msg", "Invalid value")))
    return errors


def _shadowed(field: str, failed_fields: List[str]) -> bool:
    return any(field == f or field.startswith(f + ".") for f in failed_fields)


def validate_section(
    section: SectionLike,
    settings: Optional[Dict[str, Any]] = None,
) -> List[ValidationError]:
    """
    Validate a section draft.

    Args:
        section: Section or SectionView supplying type and content
        settings: Settings bag to validate instead of section.settings
            (an editing session passes its draft settings here)

    Returns:
        Fresh list of errors; empty if the draft may be saved. Unknown
        section types produce no errors.
    """
    try:
        return _validate(section, settings)
    except Exception as e:
        logger.exception(f"Validation crashed for section {getattr(section, 'id', '?')}: {e}")
        return [ValidationError(SECTION_FIELD, GENERIC_FAILURE_MESSAGE)]


def _validate(section: SectionLike, settings: Optional[Dict[str, Any]]) -> List[ValidationError]:
    section_type = parse_section_type(section.type)
    if section_type is None:
        return []

    bag = thaw(settings if settings is not None else section.settings)
    key = settings_key_for(section_type)
    raw = active_settings(section_type, bag)
    model = settings_model_for(section_type)

    errors: List[ValidationError] = []
    try:
        model.model_validate(raw)
    except PydanticValidationError as e:
        errors.extend(_schema_errors(key, e))
    failed_fields = [e.field for e in errors]

    values = model().to_settings()
    values.update({k: v for k, v in raw.items() if v is not None})
    ctx = RuleContext(
        section_type=section_type,
        settings_key=key,
        content=section.content or "",
        values=values,
    )
    for rule in get_rules(section_type):
        for error in rule(ctx):
            if error is not None and not _shadowed(error.field, failed_fields):
                errors.append(error)

    if errors:
        logger.debug(f"Section {section.id} has {len(errors)} validation error(s)")
    return errors


def is_valid(section: SectionLike, settings: Optional[Dict[str, Any]] = None) -> bool:
    return not validate_section(section, settings)
