"""Income tax withholding and benefit-sourced taxes."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_service.calculators.benefits import BenefitResolver
from payroll_service.calculators.line_builder import LineItemBuilder
from payroll_service.calculators.types import ConceptCode, ConceptType, TaxResult
from payroll_service.config import PayrollConfig, TaxBracket

if TYPE_CHECKING:
    from payroll_service.models import Employee


class TaxEngine:
    """Computes tax lines for a gross salary.

    Income tax applies only to the part of gross above the exempt amount.
    That monthly taxable income is annualized (x12) and run through the
    progressive brackets in ``PayrollConfig.tax_brackets``; each bracket is
    upper-inclusive.

    The bracket result is an annual figure and is withheld as-is for the
    month. Payroll outputs already in production depend on this, so it is
    pinned by tests; see DESIGN.md before changing it.
    """

    def __init__(
        self,
        session: AsyncSession,
        config: PayrollConfig,
        benefit_resolver: BenefitResolver | None = None,
    ):
        self.session = session
        self.config = config
        self.benefit_resolver = benefit_resolver or BenefitResolver(session)

    async def calculate(self, employee: Employee, gross_salary: Decimal) -> TaxResult:
        lines = []

        income_tax = self.income_tax_withholding(gross_salary)
        if LineItemBuilder.round_to_cents(income_tax) > 0:
            lines.append(
                LineItemBuilder.create_tax_line(
                    ConceptCode.INCOME_TAX.value,
                    income_tax,
                    explanation="Income tax withholding",
                )
            )

        lines.extend(
            await self.benefit_resolver.resolve(
                employee.employee_id, ConceptType.TAX, gross_salary
            )
        )

        return TaxResult(lines=lines)

    def income_tax_withholding(self, gross_salary: Decimal) -> Decimal:
        exempt = self.config.income_tax_exempt_amount
        if gross_salary <= exempt:
            return Decimal("0")
        return self.calculate_income_tax(gross_salary - exempt)

    def calculate_income_tax(self, taxable_income: Decimal) -> Decimal:
        """Bracket tax on the annualized taxable income (unrounded)."""
        annual = taxable_income * 12
        if annual <= 0:
            return Decimal("0")

        bracket = self.find_bracket(annual)
        return bracket.flat_amount + (annual - bracket.lower_limit) * bracket.rate

    def find_bracket(self, annual_income: Decimal) -> TaxBracket:
        brackets = sorted(self.config.tax_brackets, key=lambda b: b.lower_limit)
        for bracket in brackets:
            if bracket.upper_limit is None or annual_income <= bracket.upper_limit:
                return bracket
        return brackets[-1]
