"""Working-hours aggregation from daily attendance records."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_service.calculators.types import WorkingHours
from payroll_service.config import PayrollConfig
from payroll_service.models import Attendance

PRESENT = "present"


class _HasTotalHours(Protocol):
    total_hours: Decimal | None


class AttendanceAggregator:
    """Converts present-day attendance into regular/overtime totals.

    Hours up to the standard working day count as regular; anything above
    counts as overtime. Absent, leave and holiday rows contribute nothing.
    """

    def __init__(self, session: AsyncSession, config: PayrollConfig):
        self.session = session
        self.config = config

    async def aggregate(
        self, employee_id: UUID, start_date: date, end_date: date
    ) -> WorkingHours:
        """Aggregate present attendance for an employee in [start, end]."""
        records = await self._get_present_records(employee_id, start_date, end_date)
        return self.summarize(records)

    def summarize(self, records: Iterable[_HasTotalHours]) -> WorkingHours:
        """Sum regular/overtime hours over already-filtered present records."""
        standard = self.config.standard_working_hours
        regular = Decimal("0")
        overtime = Decimal("0")
        days = 0

        for record in records:
            days += 1
            daily = Decimal(record.total_hours or 0)
            if daily <= standard:
                regular += daily
            else:
                regular += standard
                overtime += daily - standard

        return WorkingHours(
            regular_hours=regular,
            overtime_hours=overtime,
            total_days=days,
            worked_days=days,
        )

    async def _get_present_records(
        self, employee_id: UUID, start_date: date, end_date: date
    ) -> list[Attendance]:
        result = await self.session.execute(
            select(Attendance)
            .where(
                Attendance.employee_id == employee_id,
                Attendance.work_date >= start_date,
                Attendance.work_date <= end_date,
                Attendance.status == PRESENT,
            )
            .order_by(Attendance.work_date)
        )
        return list(result.scalars().all())
