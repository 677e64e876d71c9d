"""Base pay, overtime and allowance computation."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from payroll_service.calculators.line_builder import LineItemBuilder
from payroll_service.calculators.types import (
    ConceptCode,
    EarningsResult,
    LineCandidate,
    WorkingHours,
)
from payroll_service.config import PayrollConfig

if TYPE_CHECKING:
    from payroll_service.models import Employee


class InvalidEmployeeDataError(ValueError):
    """Raised when an employee cannot be paid with the data on record."""

    def __init__(self, employee_id: object, reason: str):
        self.employee_id = employee_id
        self.reason = reason
        super().__init__(f"Invalid data for employee {employee_id}: {reason}")


class CompensationCalculator:
    """Computes base pay and the engine's own earning lines.

    Base pay:
    - hourly: hourly_rate (or base_salary / hourly_divisor) * regular hours
    - monthly: base_salary pro-rated by worked_days / expected_working_days
      when fewer days than expected were worked

    Earnings (on top of base pay):
    - overtime: hours * base / overtime_divisor * overtime_multiplier
    - transport allowance: fixed amount while base <= 2 * minimum wage
    """

    def __init__(self, config: PayrollConfig):
        self.config = config

    def validate_employee(self, employee: Employee) -> None:
        if employee.base_salary is None or employee.base_salary <= 0:
            raise InvalidEmployeeDataError(
                employee.employee_id, "base salary must be greater than 0"
            )

    def calculate_base_salary(self, employee: Employee, hours: WorkingHours) -> Decimal:
        """Calculate base pay for the period (unrounded)."""
        base_salary = Decimal(employee.base_salary)

        if employee.is_hourly:
            hourly_rate = (
                Decimal(employee.hourly_rate)
                if employee.hourly_rate is not None
                else base_salary / self.config.hourly_divisor
            )
            return hourly_rate * hours.regular_hours

        expected_days = self.config.expected_working_days
        if hours.worked_days < expected_days:
            return base_salary * hours.worked_days / expected_days

        return base_salary

    def calculate_earnings(self, base_salary: Decimal, hours: WorkingHours) -> EarningsResult:
        """Build overtime and transport allowance lines for a base pay."""
        lines: list[LineCandidate] = []

        if hours.overtime_hours > 0:
            rate = self.overtime_rate(base_salary)
            lines.append(
                LineItemBuilder.create_earning_line(
                    ConceptCode.OVERTIME.value,
                    amount=hours.overtime_hours * rate,
                    quantity=hours.overtime_hours,
                    rate=rate,
                    explanation=f"Overtime: {hours.overtime_hours}h @ {rate:.4f}",
                )
            )

        if self.qualifies_for_transport(base_salary):
            allowance = self.config.transport_allowance
            lines.append(
                LineItemBuilder.create_earning_line(
                    ConceptCode.TRANSPORT_ALLOWANCE.value,
                    amount=allowance,
                    explanation="Transport allowance",
                )
            )

        return EarningsResult(lines=lines, base_salary=base_salary)

    def overtime_rate(self, base_salary: Decimal) -> Decimal:
        return base_salary / self.config.overtime_divisor * self.config.overtime_multiplier

    def qualifies_for_transport(self, base_salary: Decimal) -> bool:
        return base_salary <= 2 * self.config.minimum_wage
