"""Statutory, benefit and unpaid-leave deductions."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_service.calculators.benefits import BenefitResolver
from payroll_service.calculators.line_builder import LineItemBuilder
from payroll_service.calculators.types import (
    ConceptCode,
    ConceptType,
    DeductionResult,
    LineCandidate,
)
from payroll_service.config import PayrollConfig
from payroll_service.models import LeaveRequest

if TYPE_CHECKING:
    from payroll_service.models import Employee, PayrollPeriod


class DeductionEngine:
    """Computes employee deductions in a stable order.

    1) health contribution (% of gross)
    2) pension contribution (% of gross)
    3) benefit deductions
    4) unpaid leave: one line per approved unpaid request starting in the
       period, valued at base_salary / leave_day_divisor per day
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

    async def calculate(
        self,
        employee: Employee,
        gross_salary: Decimal,
        period: PayrollPeriod,
    ) -> DeductionResult:
        lines = self.statutory_lines(gross_salary)

        lines.extend(
            await self.benefit_resolver.resolve(
                employee.employee_id, ConceptType.DEDUCTION, gross_salary
            )
        )

        leaves = await self._get_unpaid_leaves(
            employee.employee_id, period.start_date, period.end_date
        )
        lines.extend(self.unpaid_leave_lines(employee, leaves))

        return DeductionResult(lines=lines)

    def statutory_lines(self, gross_salary: Decimal) -> list[LineCandidate]:
        lines: list[LineCandidate] = []

        for code, rate, label in (
            (
                ConceptCode.HEALTH_CONTRIBUTION,
                self.config.health_contribution_rate,
                "Health contribution",
            ),
            (
                ConceptCode.PENSION_CONTRIBUTION,
                self.config.pension_contribution_rate,
                "Pension contribution",
            ),
        ):
            amount = gross_salary * rate
            if LineItemBuilder.round_to_cents(amount) > 0:
                lines.append(
                    LineItemBuilder.create_deduction_line(
                        code.value,
                        amount,
                        rate=amount,
                        explanation=label,
                    )
                )

        return lines

    def unpaid_leave_lines(
        self, employee: Employee, leaves: Iterable[LeaveRequest]
    ) -> list[LineCandidate]:
        daily_salary = Decimal(employee.base_salary) / self.config.leave_day_divisor
        lines: list[LineCandidate] = []

        for leave in leaves:
            days = Decimal(leave.days_requested)
            amount = days * daily_salary
            if LineItemBuilder.round_to_cents(amount) <= 0:
                continue
            lines.append(
                LineItemBuilder.create_deduction_line(
                    ConceptCode.UNPAID_LEAVE.value,
                    amount,
                    quantity=days,
                    rate=daily_salary,
                    explanation=(
                        f"Unpaid leave {leave.start_date.isoformat()} to "
                        f"{leave.end_date.isoformat()}"
                    ),
                )
            )

        return lines

    async def _get_unpaid_leaves(
        self, employee_id: UUID, start_date: date, end_date: date
    ) -> list[LeaveRequest]:
        """Approved, unpaid requests whose start date falls in the period."""
        result = await self.session.execute(
            select(LeaveRequest)
            .where(
                LeaveRequest.employee_id == employee_id,
                LeaveRequest.status == "approved",
                LeaveRequest.is_paid.is_(False),
                LeaveRequest.start_date >= start_date,
                LeaveRequest.start_date <= end_date,
            )
            .order_by(LeaveRequest.start_date)
        )
        return list(result.scalars().all())
