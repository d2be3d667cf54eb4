"""Record status values and the transition table that governs them."""

from __future__ import annotations

from enum import Enum

from gdriveorg.errors import InvalidTransitionError


class RecordStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SYNCED = "synced"
    ERROR = "error"


# error -> approved is the explicit user re-approval path.
_TRANSITIONS: dict[RecordStatus, frozenset[RecordStatus]] = {
    RecordStatus.PENDING: frozenset({RecordStatus.APPROVED, RecordStatus.REJECTED}),
    RecordStatus.APPROVED: frozenset({RecordStatus.SYNCED, RecordStatus.ERROR}),
    RecordStatus.ERROR: frozenset({RecordStatus.APPROVED}),
    RecordStatus.REJECTED: frozenset(),
    RecordStatus.SYNCED: frozenset(),
}

TERMINAL_STATUSES: frozenset[RecordStatus] = frozenset(
    status for status, targets in _TRANSITIONS.items() if not targets
)


def can_transition(current: RecordStatus, target: RecordStatus) -> bool:
    return target in _TRANSITIONS[current]


def check_transition(current: RecordStatus, target: RecordStatus, *, file_id: str) -> None:
    """
    Raises:
        InvalidTransitionError: if target is not reachable from current.
    """
    if not can_transition(current, target):
        raise InvalidTransitionError(
            f"Cannot change status from {current.value} to {target.value}",
            details={"file_id": file_id, "from": current.value, "to": target.value},
        )
