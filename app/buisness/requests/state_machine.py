"""
State machines for request and assignment lifecycles

Encodes valid transitions. Keeps "what is allowed" separate from "how persistence occurs":
the workflow applies the transition with a conditional update so a concurrent
writer that got there first is detected.
"""

from typing import Dict, Set

from app.buisness.core.errors import ConflictError


class _StateMachine:
    """Terminal-once-left lifecycle: no transition out of a terminal state, no self-loops"""

    TERMINAL_STATES: Set[str] = set()
    TRANSITIONS: Dict[str, Set[str]] = {}
    label = 'status'

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """
        Check if transition is valid.

        Args:
            from_status: Current status
            to_status: Target status

        Returns:
            bool: True if transition is allowed
        """
        if from_status in cls.TERMINAL_STATES:
            return False
        return to_status in cls.TRANSITIONS.get(from_status, set())

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """
        Raise ConflictError if the transition is not allowed.

        Args:
            from_status: Current status
            to_status: Target status
        """
        if not cls.can_transition(from_status, to_status):
            raise ConflictError(
                f"Invalid {cls.label} transition: {from_status} → {to_status}",
                current_status=from_status,
            )

    @classmethod
    def get_allowed_transitions(cls, from_status: str) -> Set[str]:
        """Get set of allowed target statuses from current status"""
        if from_status in cls.TERMINAL_STATES:
            return set()
        return cls.TRANSITIONS.get(from_status, set())


class RequestStateMachine(_StateMachine):
    """
    State machine for AssetRequest.request_status.

    pending → approved | rejected, approved → returned (Returnable assets only,
    checked by the workflow). rejected and returned are terminal.
    """

    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    RETURNED = 'returned'

    STATUSES = (PENDING, APPROVED, REJECTED, RETURNED)
    TERMINAL_STATES = {REJECTED, RETURNED}

    TRANSITIONS: Dict[str, Set[str]] = {
        PENDING: {APPROVED, REJECTED},
        APPROVED: {RETURNED},
    }
    label = 'request status'


class AssignmentStateMachine(_StateMachine):
    """State machine for AssignedAsset.status: assigned → returned"""

    ASSIGNED = 'assigned'
    RETURNED = 'returned'

    TERMINAL_STATES = {RETURNED}
    TRANSITIONS: Dict[str, Set[str]] = {
        ASSIGNED: {RETURNED},
    }
    label = 'assignment status'
