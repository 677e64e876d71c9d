"""Per-employee payroll assembly and persistence."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from payroll_service.calculators import (
    AttendanceAggregator,
    BenefitResolver,
    CompensationCalculator,
    ConceptType,
    DeductionEngine,
    LineCandidate,
    LineItemBuilder,
    TaxEngine,
)
from payroll_service.config import PayrollConfig
from payroll_service.models import Employee, Payroll, PayrollDetail, PayrollPeriod
from payroll_service.services.concept_catalog import ConceptCatalog
from payroll_service.services.state_machine import (
    PayrollPeriodStateMachine,
    PayrollStatus,
)

logger = logging.getLogger(__name__)


class PayrollLockedError(Exception):
    """Raised when a payroll may no longer be recalculated."""

    def __init__(self, message: str):
        super().__init__(message)


class PayrollAssembler:
    """Calculates and persists the payroll of one employee for one period.

    All writes for the employee run inside one SAVEPOINT: any failure
    rolls back the payroll row and its details and propagates.
    """

    def __init__(
        self,
        session: AsyncSession,
        config: PayrollConfig,
        catalog: ConceptCatalog | None = None,
    ):
        self.session = session
        self.config = config
        self.catalog = catalog or ConceptCatalog(session)

        benefit_resolver = BenefitResolver(session)
        self.attendance = AttendanceAggregator(session, config)
        self.compensation = CompensationCalculator(config)
        self.benefits = benefit_resolver
        self.deductions = DeductionEngine(session, config, benefit_resolver)
        self.taxes = TaxEngine(session, config, benefit_resolver)

    async def calculate(self, employee: Employee, period: PayrollPeriod) -> Payroll:
        self.compensation.validate_employee(employee)

        if not PayrollPeriodStateMachine.can_calculate(period.status):
            raise PayrollLockedError(
                f"Payroll period {period.payroll_period_id} is {period.status}"
            )

        async with self.session.begin_nested():
            payroll = await self._get_or_create_payroll(employee, period)

            if PayrollPeriodStateMachine.is_payroll_finalized(payroll.status):
                raise PayrollLockedError(
                    f"Payroll {payroll.payroll_number} is {payroll.status}"
                )

            await self._clear_details(payroll)

            hours = await self.attendance.aggregate(
                employee.employee_id, period.start_date, period.end_date
            )
            base_salary = LineItemBuilder.round_to_cents(
                self.compensation.calculate_base_salary(employee, hours)
            )

            earnings = self.compensation.calculate_earnings(base_salary, hours)
            earnings.lines.extend(
                await self.benefits.resolve(
                    employee.employee_id, ConceptType.EARNING, base_salary
                )
            )
            gross_salary = earnings.gross_salary

            deductions = await self.deductions.calculate(employee, gross_salary, period)
            taxes = await self.taxes.calculate(employee, gross_salary)

            lines = [*earnings.lines, *deductions.lines, *taxes.lines]
            errors = LineItemBuilder.validate_lines(lines)
            if errors:
                raise ValueError("; ".join(errors))

            await self._persist_details(payroll, lines)

            payroll.base_salary = base_salary
            payroll.regular_hours = hours.regular_hours
            payroll.overtime_hours = hours.overtime_hours
            payroll.worked_days = hours.worked_days
            payroll.gross_salary = gross_salary
            payroll.total_earnings = gross_salary
            payroll.total_deductions = deductions.total
            payroll.total_taxes = taxes.total
            payroll.net_salary = LineItemBuilder.calculate_net(
                gross_salary, deductions.total, taxes.total
            )
            payroll.status = PayrollStatus.CALCULATED.value
            payroll.calculated_at = datetime.now(timezone.utc)

            await self.session.flush()

        await self.session.refresh(payroll, attribute_names=["details"])

        logger.info(
            "Payroll calculated for employee %s, period %s: gross=%s net=%s",
            employee.employee_id,
            period.payroll_period_id,
            payroll.gross_salary,
            payroll.net_salary,
        )
        return payroll

    async def get_payroll(self, payroll_id: UUID) -> Payroll | None:
        """Load a payroll with its detail lines."""
        result = await self.session.execute(
            select(Payroll)
            .where(Payroll.payroll_id == payroll_id)
            .options(selectinload(Payroll.details))
        )
        return result.scalar_one_or_none()

    @staticmethod
    def payroll_number(employee: Employee, period: PayrollPeriod) -> str:
        return f"PAY-{period.start_date:%Y%m%d}-{employee.employee_number}"

    async def _get_or_create_payroll(
        self, employee: Employee, period: PayrollPeriod
    ) -> Payroll:
        result = await self.session.execute(
            select(Payroll).where(
                Payroll.employee_id == employee.employee_id,
                Payroll.payroll_period_id == period.payroll_period_id,
            )
        )
        payroll = result.scalar_one_or_none()
        if payroll is not None:
            return payroll

        payroll = Payroll(
            employee_id=employee.employee_id,
            payroll_period_id=period.payroll_period_id,
            payroll_number=self.payroll_number(employee, period),
            base_salary=Decimal(employee.base_salary),
            gross_salary=Decimal(employee.base_salary),
            net_salary=Decimal(employee.base_salary),
            status=PayrollStatus.DRAFT.value,
        )
        self.session.add(payroll)
        await self.session.flush()
        return payroll

    async def _clear_details(self, payroll: Payroll) -> None:
        self.session.expire(payroll, ["details"])
        await self.session.execute(
            delete(PayrollDetail).where(PayrollDetail.payroll_id == payroll.payroll_id)
        )

    async def _persist_details(self, payroll: Payroll, lines: list[LineCandidate]) -> None:
        for line_number, line in enumerate(lines, start=1):
            concept_id = line.payroll_concept_id
            if concept_id is None:
                concept = await self.catalog.resolve(line.concept_code)
                concept_id = concept.payroll_concept_id

            self.session.add(
                PayrollDetail(
                    payroll_id=payroll.payroll_id,
                    payroll_concept_id=concept_id,
                    line_number=line_number,
                    concept_code=line.concept_code,
                    concept_type=line.concept_type.value,
                    quantity=line.quantity,
                    rate=line.rate,
                    amount=line.amount,
                    description=line.explanation,
                )
            )
