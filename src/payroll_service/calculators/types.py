"""Type definitions for calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from uuid import UUID


class ConceptType(str, Enum):
    """Payroll concept (line item) types."""

    EARNING = "earning"
    DEDUCTION = "deduction"
    TAX = "tax"


class ConceptCode(str, Enum):
    """Standard concept codes the engine emits itself.

    These must exist in the concept catalog before calculation.
    """

    OVERTIME = "HORAS_EXTRA"
    TRANSPORT_ALLOWANCE = "SUBSIDIO_TRANSPORTE"
    HEALTH_CONTRIBUTION = "SALUD_EMP"
    PENSION_CONTRIBUTION = "PENSION_EMP"
    UNPAID_LEAVE = "UNPAID_LEAVE"
    INCOME_TAX = "RETENCION_FUENTE"


# Prefix for synthesized codes of benefits whose concept has no code
SYNTHETIC_CODE_PREFIX: dict[ConceptType, str] = {
    ConceptType.EARNING: "BENEFIT",
    ConceptType.DEDUCTION: "DEDUCTION",
    ConceptType.TAX: "TAX",
}


@dataclass(frozen=True)
class WorkingHours:
    """Aggregated attendance for one employee over a period."""

    regular_hours: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    total_days: int = 0
    worked_days: int = 0

    @property
    def worked_hours(self) -> Decimal:
        return self.regular_hours + self.overtime_hours


@dataclass
class LineCandidate:
    """A candidate payroll detail before persistence.

    Amounts are always positive; the concept type decides whether the line
    adds to gross or is subtracted from it.
    """

    concept_type: ConceptType
    concept_code: str
    amount: Decimal
    quantity: Decimal = Decimal("1")
    rate: Decimal | None = None

    # Set when the line comes from a benefit whose concept is already known
    payroll_concept_id: UUID | None = None
    source_benefit_id: UUID | None = None
    explanation: str | None = None

    def __post_init__(self) -> None:
        if self.rate is None:
            self.rate = self.amount


@dataclass
class ComponentResult:
    """Ordered lines produced by one calculation component."""

    lines: list[LineCandidate] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((line.amount for line in self.lines), Decimal("0"))

    def total_for(self, code: str) -> Decimal:
        """Sum of all lines carrying a given concept code."""
        return sum(
            (line.amount for line in self.lines if line.concept_code == code),
            Decimal("0"),
        )

    def breakdown(self) -> list[tuple[str, Decimal]]:
        """(concept_code, amount) pairs in emission order."""
        return [(line.concept_code, line.amount) for line in self.lines]


@dataclass
class EarningsResult(ComponentResult):
    """Base pay plus earning lines; gross = base + lines."""

    base_salary: Decimal = Decimal("0")

    @property
    def gross_salary(self) -> Decimal:
        return self.base_salary + self.total

    @property
    def overtime_pay(self) -> Decimal:
        return self.total_for(ConceptCode.OVERTIME.value)


@dataclass
class DeductionResult(ComponentResult):
    """Deduction lines (statutory, benefit-sourced, unpaid leave)."""

    @property
    def unpaid_leave(self) -> Decimal:
        return self.total_for(ConceptCode.UNPAID_LEAVE.value)


@dataclass
class TaxResult(ComponentResult):
    """Tax lines (income tax withholding, benefit-sourced taxes)."""

    @property
    def income_tax(self) -> Decimal:
        return self.total_for(ConceptCode.INCOME_TAX.value)
