"""Payroll period and payroll status machine with transition validation."""

from __future__ import annotations

from enum import Enum


class PayrollPeriodStatus(str, Enum):
    """Payroll period status values."""

    OPEN = "open"
    CALCULATED = "calculated"
    APPROVED = "approved"
    CLOSED = "closed"


class PayrollStatus(str, Enum):
    """Per-employee payroll status values."""

    DRAFT = "draft"
    CALCULATED = "calculated"
    APPROVED = "approved"
    PAID = "paid"
    CANCELLED = "cancelled"


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class PayrollPeriodStateMachine:
    """State machine for payroll period status transitions.

    Allowed transitions:
    - open → calculated
    - calculated → calculated (re-run)
    - calculated → approved
    - approved → closed
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayrollPeriodStatus.OPEN: [PayrollPeriodStatus.CALCULATED],
        PayrollPeriodStatus.CALCULATED: [
            PayrollPeriodStatus.CALCULATED,
            PayrollPeriodStatus.APPROVED,
        ],
        PayrollPeriodStatus.APPROVED: [PayrollPeriodStatus.CLOSED],
        PayrollPeriodStatus.CLOSED: [],  # Terminal state
    }

    # Period statuses where payrolls may be (re)calculated
    CALCULATION_ALLOWED = {
        PayrollPeriodStatus.OPEN,
        PayrollPeriodStatus.CALCULATED,
    }

    # Payroll statuses whose results are final
    PAYROLL_FINALIZED = {
        PayrollStatus.APPROVED,
        PayrollStatus.PAID,
        PayrollStatus.CANCELLED,
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def can_calculate(cls, status: str) -> bool:
        """Check if payroll calculation is allowed in this period status."""
        return status in cls.CALCULATION_ALLOWED

    @classmethod
    def is_payroll_finalized(cls, status: str) -> bool:
        return status in cls.PAYROLL_FINALIZED

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])
