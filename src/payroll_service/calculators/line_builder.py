"""Line item builder with cent rounding."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from payroll_service.calculators.types import ConceptType, LineCandidate


class LineItemBuilder:
    """Builds payroll line candidates.

    Rounding:
    - amounts to 2 decimals at line creation, so totals and the net identity
      hold exactly at persistence
    - rates keep 4 decimals
    - internal compute is unrounded Decimal
    """

    RATE_PRECISION = Decimal("0.0001")
    OUTPUT_PRECISION = Decimal("0.01")

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places (cents)."""
        return amount.quantize(LineItemBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def round_rate(rate: Decimal) -> Decimal:
        return rate.quantize(LineItemBuilder.RATE_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def create_line(
        concept_type: ConceptType,
        concept_code: str,
        amount: Decimal,
        quantity: Decimal = Decimal("1"),
        rate: Decimal | None = None,
        payroll_concept_id: UUID | None = None,
        source_benefit_id: UUID | None = None,
        explanation: str | None = None,
    ) -> LineCandidate:
        """Create a line with a positive, cent-rounded amount."""
        amount = LineItemBuilder.round_to_cents(abs(amount))
        return LineCandidate(
            concept_type=concept_type,
            concept_code=concept_code,
            amount=amount,
            quantity=quantity,
            rate=LineItemBuilder.round_rate(rate) if rate is not None else amount,
            payroll_concept_id=payroll_concept_id,
            source_benefit_id=source_benefit_id,
            explanation=explanation,
        )

    @staticmethod
    def create_earning_line(
        concept_code: str,
        amount: Decimal,
        quantity: Decimal = Decimal("1"),
        rate: Decimal | None = None,
        explanation: str | None = None,
    ) -> LineCandidate:
        return LineItemBuilder.create_line(
            ConceptType.EARNING, concept_code, amount, quantity, rate, explanation=explanation
        )

    @staticmethod
    def create_deduction_line(
        concept_code: str,
        amount: Decimal,
        quantity: Decimal = Decimal("1"),
        rate: Decimal | None = None,
        explanation: str | None = None,
    ) -> LineCandidate:
        return LineItemBuilder.create_line(
            ConceptType.DEDUCTION, concept_code, amount, quantity, rate, explanation=explanation
        )

    @staticmethod
    def create_tax_line(
        concept_code: str,
        amount: Decimal,
        explanation: str | None = None,
    ) -> LineCandidate:
        return LineItemBuilder.create_line(
            ConceptType.TAX, concept_code, amount, explanation=explanation
        )

    @staticmethod
    def sum_by_type(lines: list[LineCandidate]) -> dict[ConceptType, Decimal]:
        """Sum line amounts by concept type."""
        totals: dict[ConceptType, Decimal] = {ct: Decimal("0") for ct in ConceptType}
        for line in lines:
            totals[line.concept_type] += line.amount
        return totals

    @staticmethod
    def calculate_net(
        gross: Decimal, total_deductions: Decimal, total_taxes: Decimal
    ) -> Decimal:
        """NET = GROSS - DEDUCTIONS - TAXES."""
        return LineItemBuilder.round_to_cents(gross - total_deductions - total_taxes)

    @staticmethod
    def validate_lines(lines: list[LineCandidate]) -> list[str]:
        """Return error messages for lines that should never be persisted."""
        errors: list[str] = []
        for i, line in enumerate(lines):
            if line.amount <= 0:
                errors.append(
                    f"Line {i} ({line.concept_code}) has non-positive amount {line.amount}"
                )
        return errors
