"""Period-level payroll runs, approval and closing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_service.config import PayrollConfig
from payroll_service.models import Employee, EmployeePosition, Payroll, PayrollPeriod
from payroll_service.services.locking_service import PeriodLockService
from payroll_service.services.payroll_assembler import PayrollAssembler
from payroll_service.services.state_machine import (
    PayrollPeriodStateMachine,
    PayrollPeriodStatus,
    PayrollStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class PeriodProcessResult:
    """Outcome of a period run; one entry in ``details`` per employee."""

    processed: int = 0
    errors: int = 0
    details: list[dict[str, Any]] = field(default_factory=list)

    def record_success(self, employee_id: UUID, payroll: Payroll) -> None:
        self.processed += 1
        self.details.append(
            {
                "employee_id": employee_id,
                "payroll_id": payroll.payroll_id,
                "status": "success",
                "net_salary": payroll.net_salary,
            }
        )

    def record_error(self, employee_id: UUID, exc: Exception) -> None:
        self.errors += 1
        self.details.append(
            {
                "employee_id": employee_id,
                "status": "error",
                "message": str(exc),
            }
        )


class PeriodProcessor:
    """Drives payroll calculation across a period.

    Operations:
    - process_period: calculate every eligible employee, isolate failures,
      refresh period totals
    - approve_period: calculated → approved, approving calculated payrolls
    - close_period: approved → closed
    """

    def __init__(self, session: AsyncSession, config: PayrollConfig):
        self.session = session
        self.config = config
        self.assembler = PayrollAssembler(session, config)
        self.lock_service = PeriodLockService(session)

    async def get_period(self, payroll_period_id: UUID) -> PayrollPeriod | None:
        result = await self.session.execute(
            select(PayrollPeriod).where(
                PayrollPeriod.payroll_period_id == payroll_period_id
            )
        )
        return result.scalar_one_or_none()

    async def process_period(self, period: PayrollPeriod) -> PeriodProcessResult:
        period_id = period.payroll_period_id
        PayrollPeriodStateMachine.validate_transition(
            period.status, PayrollPeriodStatus.CALCULATED
        )

        result = PeriodProcessResult()

        async with self.lock_service.hold(period_id):
            employees = await self.get_eligible_employees(period)

            for employee in employees:
                employee_id = employee.employee_id
                try:
                    payroll = await self.assembler.calculate(employee, period)
                except Exception as exc:
                    logger.exception(
                        "Error processing payroll for employee %s, period %s",
                        employee_id,
                        period_id,
                    )
                    result.record_error(employee_id, exc)
                else:
                    result.record_success(employee_id, payroll)

            await self.update_period_totals(period)
            period.status = PayrollPeriodStatus.CALCULATED.value
            await self.session.flush()

        logger.info(
            "Payroll period %s processed: %d succeeded, %d failed",
            period_id,
            result.processed,
            result.errors,
        )
        return result

    async def get_eligible_employees(self, period: PayrollPeriod) -> list[Employee]:
        """Active employees with a current position started by period end."""
        current_position = and_(
            EmployeePosition.status == "active",
            EmployeePosition.end_date.is_(None),
            EmployeePosition.start_date <= period.end_date,
        )
        result = await self.session.execute(
            select(Employee)
            .where(
                Employee.status == "active",
                Employee.positions.any(current_position),
            )
            .order_by(Employee.employee_number)
        )
        return list(result.scalars().all())

    async def update_period_totals(self, period: PayrollPeriod) -> None:
        """Recompute period totals from every payroll row of the period."""
        result = await self.session.execute(
            select(
                Payroll.gross_salary,
                Payroll.total_deductions,
                Payroll.total_taxes,
                Payroll.net_salary,
            ).where(Payroll.payroll_period_id == period.payroll_period_id)
        )
        rows = result.all()

        period.total_employees = len(rows)
        period.total_gross = sum((Decimal(r.gross_salary) for r in rows), Decimal("0"))
        period.total_deductions = sum(
            (Decimal(r.total_deductions) for r in rows), Decimal("0")
        )
        period.total_taxes = sum((Decimal(r.total_taxes) for r in rows), Decimal("0"))
        period.total_net = sum((Decimal(r.net_salary) for r in rows), Decimal("0"))

    async def approve_period(
        self, period: PayrollPeriod, approved_by: str | None = None
    ) -> PayrollPeriod:
        PayrollPeriodStateMachine.validate_transition(
            period.status, PayrollPeriodStatus.APPROVED
        )

        async with self.lock_service.hold(period.payroll_period_id):
            await self.session.execute(
                update(Payroll)
                .where(
                    Payroll.payroll_period_id == period.payroll_period_id,
                    Payroll.status == PayrollStatus.CALCULATED.value,
                )
                .values(status=PayrollStatus.APPROVED.value)
            )
            period.status = PayrollPeriodStatus.APPROVED.value
            period.approved_at = datetime.now(timezone.utc)
            period.approved_by = approved_by
            await self.session.flush()

        logger.info("Payroll period %s approved by %s", period.payroll_period_id, approved_by)
        return period

    async def close_period(
        self, period: PayrollPeriod, closed_by: str | None = None
    ) -> PayrollPeriod:
        PayrollPeriodStateMachine.validate_transition(
            period.status, PayrollPeriodStatus.CLOSED
        )

        period.status = PayrollPeriodStatus.CLOSED.value
        period.closed_at = datetime.now(timezone.utc)
        period.closed_by = closed_by
        await self.session.flush()

        logger.info("Payroll period %s closed by %s", period.payroll_period_id, closed_by)
        return period
