"""Payroll services."""

from payroll_service.services.concept_catalog import (
    STANDARD_CONCEPTS,
    ConceptCatalog,
    ConceptNotFoundError,
)
from payroll_service.services.locking_service import PeriodLockedError, PeriodLockService
from payroll_service.services.payroll_assembler import PayrollAssembler, PayrollLockedError
from payroll_service.services.period_processor import PeriodProcessor, PeriodProcessResult
from payroll_service.services.state_machine import (
    InvalidTransitionError,
    PayrollPeriodStateMachine,
    PayrollPeriodStatus,
    PayrollStatus,
)

__all__ = [
    "STANDARD_CONCEPTS",
    "ConceptCatalog",
    "ConceptNotFoundError",
    "InvalidTransitionError",
    "PayrollAssembler",
    "PayrollLockedError",
    "PayrollPeriodStateMachine",
    "PayrollPeriodStatus",
    "PayrollStatus",
    "PeriodLockService",
    "PeriodLockedError",
    "PeriodProcessResult",
    "PeriodProcessor",
]
