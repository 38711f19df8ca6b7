"""
pagebuilder.errors - Error taxonomy, recovery actions and isolation boundary
"""

from .taxonomy import (
    ErrorKind,
    FATAL_KINDS,
    PageBuilderError,
    create_error_message,
    create_page_builder_error,
    classify_exception,
    is_network_error,
    log_page_builder_error,
    DATA_STRUCTURE_MESSAGE,
    NETWORK_MESSAGE,
    DATA_FORMAT_MESSAGE,
)
from .recovery import (
    RecoveryActionType,
    RecoveryAction,
    RECOVERY_LABELS,
    DISMISS_LABEL,
    generate_recovery_actions,
    invoke_recovery_action,
    RetryPolicy,
    AUTO_RECOVERY_STRATEGIES,
    should_retry_error,
    get_retry_delay,
)
from .boundary import ActionRef, BoundaryState, ErrorBoundary, ErrorCard

__all__ = [
    # Taxonomy
    "ErrorKind",
    "FATAL_KINDS",
    "PageBuilderError",
    "create_error_message",
    "create_page_builder_error",
    "classify_exception",
    "is_network_error",
    "log_page_builder_error",
    "DATA_STRUCTURE_MESSAGE",
    "NETWORK_MESSAGE",
    "DATA_FORMAT_MESSAGE",
    # Recovery
    "RecoveryActionType",
    "RecoveryAction",
    "RECOVERY_LABELS",
    "DISMISS_LABEL",
    "generate_recovery_actions",
    "invoke_recovery_action",
    "RetryPolicy",
    "AUTO_RECOVERY_STRATEGIES",
    "should_retry_error",
    "get_retry_delay",
    # Boundary
    "ActionRef",
    "BoundaryState",
    "ErrorBoundary",
    "ErrorCard",
]
