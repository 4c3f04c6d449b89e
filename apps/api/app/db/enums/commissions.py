"""Commission-related enums."""

from enum import Enum


class CommissionStatus(str, Enum):
    """
    Commission lifecycle status.

    Typical flow:
        pending → approved → completed → paid
        pending/approved/completed → rejected

    Any status may currently be set to any other unless strict transitions
    are enabled (see ``ALLOWED_STATUS_TRANSITIONS``).
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"
    COMPLETED = "completed"


ALLOWED_STATUS_TRANSITIONS: dict[CommissionStatus, frozenset[CommissionStatus]] = {
    CommissionStatus.PENDING: frozenset({CommissionStatus.APPROVED, CommissionStatus.REJECTED}),
    CommissionStatus.APPROVED: frozenset({CommissionStatus.COMPLETED, CommissionStatus.REJECTED}),
    CommissionStatus.COMPLETED: frozenset({CommissionStatus.PAID, CommissionStatus.REJECTED}),
    CommissionStatus.REJECTED: frozenset(),
    CommissionStatus.PAID: frozenset(),
}


class IntakeOutcome(str, Enum):
    """Result of a public commission submission."""

    ACCEPTED = "accepted"
    QUEUE_CLOSED = "queue_closed"
    QUEUE_FULL = "queue_full"
    VALIDATION_ERROR = "validation_error"
