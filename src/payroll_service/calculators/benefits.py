"""Employee benefit resolution (earnings, deductions, taxes)."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from payroll_service.calculators.line_builder import LineItemBuilder
from payroll_service.calculators.types import (
    SYNTHETIC_CODE_PREFIX,
    ConceptType,
    LineCandidate,
)
from payroll_service.models import EmployeeBenefit, PayrollConcept


class BenefitResolver:
    """Turns active employee benefits of one concept type into lines.

    ``amount`` wins when set; otherwise ``percentage`` of the base amount
    (base pay for earnings, gross salary for deductions and taxes).
    Amounts that round to zero or below are skipped.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve(
        self,
        employee_id: UUID,
        concept_type: ConceptType,
        base_amount: Decimal,
    ) -> list[LineCandidate]:
        benefits = await self._get_active_benefits(employee_id, concept_type)
        return self.build_lines(benefits, concept_type, base_amount)

    def build_lines(
        self,
        benefits: Iterable[EmployeeBenefit],
        concept_type: ConceptType,
        base_amount: Decimal,
    ) -> list[LineCandidate]:
        lines: list[LineCandidate] = []

        for benefit in benefits:
            concept = benefit.payroll_concept
            if concept.concept_type != concept_type.value:
                continue

            amount = self.benefit_amount(benefit, base_amount)
            if LineItemBuilder.round_to_cents(amount) <= 0:
                continue

            lines.append(
                LineItemBuilder.create_line(
                    concept_type,
                    self.concept_code_for(benefit, concept_type),
                    amount,
                    payroll_concept_id=concept.payroll_concept_id,
                    source_benefit_id=benefit.employee_benefit_id,
                    explanation=concept.name,
                )
            )

        return lines

    @staticmethod
    def benefit_amount(benefit: EmployeeBenefit, base_amount: Decimal) -> Decimal:
        if benefit.amount is not None:
            return Decimal(benefit.amount)
        if benefit.percentage is not None:
            return base_amount * Decimal(benefit.percentage) / 100
        return Decimal("0")

    @staticmethod
    def concept_code_for(benefit: EmployeeBenefit, concept_type: ConceptType) -> str:
        code = benefit.payroll_concept.code
        if code:
            return code
        return f"{SYNTHETIC_CODE_PREFIX[concept_type]}_{benefit.employee_benefit_id}"

    async def _get_active_benefits(
        self, employee_id: UUID, concept_type: ConceptType
    ) -> list[EmployeeBenefit]:
        result = await self.session.execute(
            select(EmployeeBenefit)
            .join(EmployeeBenefit.payroll_concept)
            .where(
                EmployeeBenefit.employee_id == employee_id,
                EmployeeBenefit.status == "active",
                PayrollConcept.concept_type == concept_type.value,
            )
            .options(selectinload(EmployeeBenefit.payroll_concept))
            .order_by(EmployeeBenefit.created_at, EmployeeBenefit.employee_benefit_id)
        )
        return list(result.scalars().all())
