"""
errors/taxonomy.py - Page builder error classification

Every failure the editor surfaces to the operator is normalised into a
PageBuilderError: a kind, a user-facing message, the technical details
(traceback) and where it happened.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional
import json
import logging
import traceback
import uuid

logger = logging.getLogger("pagebuilder.errors")


class ErrorKind(Enum):
    """Where an error came from."""
    RENDER = "render"
    VALIDATION = "validation"
    NETWORK = "network"
    UNKNOWN = "unknown"


# Kinds that can never be recovered from in place
FATAL_KINDS: FrozenSet[ErrorKind] = frozenset()


# =============================================================================
# USER-FACING MESSAGES
# =============================================================================

DATA_STRUCTURE_MESSAGE = "Data structure is invalid. This might be due to a recent update."
NETWORK_MESSAGE = "Network connection issue. Please check your internet connection."
DATA_FORMAT_MESSAGE = "Data format error. The page data might be corrupted."
FALLBACK_MESSAGE = "An unexpected error occurred."


def is_network_error(exc: BaseException) -> bool:
    """True for connection, timeout and fetch failures."""
    if isinstance(exc, (ConnectionError, TimeoutError)):
        return True
    text = f"{type(exc).__name__} {exc}".lower()
    return "network" in text or "fetch" in text


def _is_data_structure_error(exc: BaseException) -> bool:
    if isinstance(exc, (AttributeError, KeyError, IndexError)):
        return True
    return isinstance(exc, TypeError) and "NoneType" in str(exc)


def _is_data_format_error(exc: BaseException) -> bool:
    return isinstance(exc, json.JSONDecodeError) or "JSON" in str(exc)


def create_error_message(exc: BaseException, component: Optional[str] = None) -> str:
    """
    Turn an exception into a message suitable for the operator.

    Args:
        exc: The raised exception
        component: Human-readable name of the failing component

    Returns:
        Friendly message for recognised failure shapes, otherwise
        "<component>: <exception message>"
    """
    if _is_data_structure_error(exc):
        return DATA_STRUCTURE_MESSAGE
    if is_network_error(exc):
        return NETWORK_MESSAGE
    if _is_data_format_error(exc):
        return DATA_FORMAT_MESSAGE

    text = str(exc) or FALLBACK_MESSAGE
    return f"{component}: {text}" if component else text


# =============================================================================
# ERROR RECORD
# =============================================================================

@dataclass
class PageBuilderError:
    """Structured, user-facing error."""

    error_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    kind: ErrorKind = ErrorKind.UNKNOWN
    message: str = ""
    details: str = ""

    # Context
    component: Optional[str] = None
    section_id: Optional[str] = None
    exception_type: str = ""

    recoverable: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_id": self.error_id,
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
            "component": self.component,
            "section_id": self.section_id,
            "exception_type": self.exception_type,
            "recoverable": self.recoverable,
            "created_at": self.created_at.isoformat(),
        }


def classify_exception(exc: BaseException) -> ErrorKind:
    """Best-effort kind for an exception raised outside a render."""
    if is_network_error(exc):
        return ErrorKind.NETWORK
    return ErrorKind.UNKNOWN


def create_page_builder_error(
    exc: BaseException,
    kind: ErrorKind = ErrorKind.UNKNOWN,
    component: Optional[str] = None,
    section_id: Optional[str] = None,
    recoverable: Optional[bool] = None,
) -> PageBuilderError:
    """
    Factory for PageBuilderError from a raised exception.

    Args:
        exc: The raised exception
        kind: Classification decided by the caller
        component: Failing component, e.g. "Hero Section"
        section_id: Section the failure belongs to, if any
        recoverable: Override; defaults to True unless kind is fatal

    Returns:
        PageBuilderError with the traceback in details
    """
    if recoverable is None:
        recoverable = kind not in FATAL_KINDS
    details = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return PageBuilderError(
        kind=kind,
        message=create_error_message(exc, component),
        details=details,
        component=component,
        section_id=section_id,
        exception_type=type(exc).__name__,
        recoverable=recoverable,
    )


def log_page_builder_error(error: PageBuilderError, **context: Any) -> None:
    """Log a classified error with its context."""
    logger.error(
        f"PageBuilder {error.kind.value} error [{error.error_id}] "
        f"in {error.component or 'page builder'}: {error.message}",
        extra={"page_builder_error": error.to_dict(), "context": context},
    )
    if error.details:
        logger.debug(error.details)
