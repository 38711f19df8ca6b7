"""
errors/recovery.py - Recovery actions for page builder errors

Recovery actions are derived on demand from an error and the callbacks the
failing call site supplies; they are never stored on the error.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional
import logging

from .taxonomy import ErrorKind, PageBuilderError

logger = logging.getLogger("pagebuilder.errors.recovery")


class RecoveryActionType(Enum):
    """Recovery action types."""
    RETRY = "retry"
    RESET = "reset"
    FALLBACK = "fallback"
    DISMISS = "dismiss"


RecoveryCallback = Callable[[], None]


@dataclass(frozen=True)
class RecoveryAction:
    """An operator-invokable way out of an error."""

    type: RecoveryActionType
    label: str
    action: RecoveryCallback

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type.value, "label": self.label}


# Button labels per error kind
RECOVERY_LABELS: Dict[ErrorKind, Dict[RecoveryActionType, str]] = {
    ErrorKind.RENDER: {
        RecoveryActionType.RETRY: "Retry Section",
        RecoveryActionType.RESET: "Reset Section",
        RecoveryActionType.FALLBACK: "Use Fallback Content",
    },
    ErrorKind.NETWORK: {
        RecoveryActionType.RETRY: "Retry Connection",
        RecoveryActionType.RESET: "Reset to Last Saved",
        RecoveryActionType.FALLBACK: "Save as Draft",
    },
    ErrorKind.VALIDATION: {
        RecoveryActionType.RETRY: "Try Again",
        RecoveryActionType.RESET: "Reset",
        RecoveryActionType.FALLBACK: "Use Fallback Content",
    },
    ErrorKind.UNKNOWN: {
        RecoveryActionType.RETRY: "Try Again",
        RecoveryActionType.RESET: "Reset",
        RecoveryActionType.FALLBACK: "Use Fallback Content",
    },
}

DISMISS_LABEL = "Dismiss"


def _noop() -> None:
    return None


def generate_recovery_actions(
    error: PageBuilderError,
    on_retry: Optional[RecoveryCallback] = None,
    on_reset: Optional[RecoveryCallback] = None,
    on_fallback: Optional[RecoveryCallback] = None,
) -> List[RecoveryAction]:
    """
    Derive the recovery actions offered for an error.

    Actions come in the order retry, reset, fallback, one per supplied
    callback. With no callbacks a single dismiss action is offered.

    Args:
        error: The classified error
        on_retry: Re-attempt the failed operation
        on_reset: Return to a known-good state
        on_fallback: Substitute safe content

    Returns:
        Ordered list of recovery actions
    """
    labels = RECOVERY_LABELS.get(error.kind, RECOVERY_LABELS[ErrorKind.UNKNOWN])
    actions = []
    for action_type, callback in (
        (RecoveryActionType.RETRY, on_retry),
        (RecoveryActionType.RESET, on_reset),
        (RecoveryActionType.FALLBACK, on_fallback),
    ):
        if callback is not None:
            actions.append(RecoveryAction(action_type, labels[action_type], callback))

    if not actions:
        actions.append(RecoveryAction(RecoveryActionType.DISMISS, DISMISS_LABEL, _noop))
    return actions


def invoke_recovery_action(action: RecoveryAction) -> bool:
    """
    Run a recovery action.

    Returns:
        True if the action completed, False if it raised (the failure is
        logged, never propagated)
    """
    try:
        action.action()
        return True
    except Exception as e:
        logger.error(f"Recovery action '{action.label}' failed: {e}", exc_info=True)
        return False


# =============================================================================
# AUTOMATIC RETRY POLICY
# =============================================================================

@dataclass(frozen=True)
class RetryPolicy:
    """How often and how fast an error kind may be retried automatically."""

    max_retries: int
    retry_delay: float = 1.0
    backoff_multiplier: float = 1.0


AUTO_RECOVERY_STRATEGIES: Dict[ErrorKind, RetryPolicy] = {
    ErrorKind.NETWORK: RetryPolicy(max_retries=3, retry_delay=1.0, backoff_multiplier=2.0),
    ErrorKind.RENDER: RetryPolicy(max_retries=2, retry_delay=1.0),
}

DEFAULT_RETRY_DELAY = 1.0


def should_retry_error(error: PageBuilderError, retry_count: int) -> bool:
    """True if another automatic retry is allowed after retry_count attempts."""
    policy = AUTO_RECOVERY_STRATEGIES.get(error.kind)
    if policy is None or not error.recoverable:
        return False
    return retry_count < policy.max_retries


def get_retry_delay(error: PageBuilderError, retry_count: int) -> float:
    """Seconds to wait before retry number retry_count (0-based)."""
    policy = AUTO_RECOVERY_STRATEGIES.get(error.kind)
    if policy is None:
        return DEFAULT_RETRY_DELAY
    return policy.retry_delay * (policy.backoff_multiplier ** retry_count)
