"""ORM models."""

from payroll_service.models.base import Base, TimestampMixin
from payroll_service.models.employee import (
    Attendance,
    Employee,
    EmployeePosition,
    LeaveRequest,
    Position,
)
from payroll_service.models.payroll import (
    EmployeeBenefit,
    Payroll,
    PayrollConcept,
    PayrollDetail,
    PayrollPeriod,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "Attendance",
    "Employee",
    "EmployeePosition",
    "LeaveRequest",
    "Position",
    "EmployeeBenefit",
    "Payroll",
    "PayrollConcept",
    "PayrollDetail",
    "PayrollPeriod",
]
