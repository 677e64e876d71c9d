"""Payroll calculation components."""

from payroll_service.calculators.attendance import AttendanceAggregator
from payroll_service.calculators.benefits import BenefitResolver
from payroll_service.calculators.compensation import (
    CompensationCalculator,
    InvalidEmployeeDataError,
)
from payroll_service.calculators.deductions import DeductionEngine
from payroll_service.calculators.line_builder import LineItemBuilder
from payroll_service.calculators.tax import TaxEngine
from payroll_service.calculators.types import (
    ConceptCode,
    ConceptType,
    DeductionResult,
    EarningsResult,
    LineCandidate,
    TaxResult,
    WorkingHours,
)

__all__ = [
    "AttendanceAggregator",
    "BenefitResolver",
    "CompensationCalculator",
    "ConceptCode",
    "ConceptType",
    "DeductionEngine",
    "DeductionResult",
    "EarningsResult",
    "InvalidEmployeeDataError",
    "LineCandidate",
    "LineItemBuilder",
    "TaxEngine",
    "TaxResult",
    "WorkingHours",
]
