"""Employee, position, and attendance-side input models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_service.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from payroll_service.models.payroll import EmployeeBenefit, Payroll


class Employee(Base, TimestampMixin):
    """Employee record (read-only input to payroll)."""

    __tablename__ = "employee"

    employee_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_number: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    base_salary: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    salary_type: Mapped[str] = mapped_column(String, nullable=False, default="monthly")
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(15, 4), nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")

    __table_args__ = (
        CheckConstraint("base_salary >= 0", name="employee_base_salary_check"),
        CheckConstraint(
            "salary_type IN ('monthly', 'hourly')",
            name="employee_salary_type_check",
        ),
        CheckConstraint(
            "status IN ('active', 'inactive', 'terminated')",
            name="employee_status_check",
        ),
    )

    # Relationships
    positions: Mapped[list[EmployeePosition]] = relationship(back_populates="employee")
    attendances: Mapped[list[Attendance]] = relationship(back_populates="employee")
    leave_requests: Mapped[list[LeaveRequest]] = relationship(back_populates="employee")
    benefits: Mapped[list[EmployeeBenefit]] = relationship(back_populates="employee")
    payrolls: Mapped[list[Payroll]] = relationship(back_populates="employee")

    @property
    def is_hourly(self) -> bool:
        return self.salary_type == "hourly"


class Position(Base, TimestampMixin):
    """Job position (instructor, coordinator, ...)."""

    __tablename__ = "position"

    position_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    code: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String, nullable=False)


class EmployeePosition(Base, TimestampMixin):
    """Assignment of an employee to a position."""

    __tablename__ = "employee_position"

    employee_position_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    position_id: Mapped[UUID] = mapped_column(
        ForeignKey("position.position_id", ondelete="CASCADE"),
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    salary: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'inactive')",
            name="employee_position_status_check",
        ),
        CheckConstraint(
            "end_date IS NULL OR end_date >= start_date",
            name="employee_position_dates_check",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="positions")
    position: Mapped[Position] = relationship()


class Attendance(Base, TimestampMixin):
    """Daily attendance record (one per employee per date)."""

    __tablename__ = "attendance"

    attendance_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    work_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    total_hours: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="absent")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="attendance_employee_date_unique"),
        CheckConstraint(
            "status IN ('present', 'absent', 'late', 'very_late', 'leave', 'holiday')",
            name="attendance_status_check",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="attendances")


class LeaveRequest(Base, TimestampMixin):
    """Leave request; approved unpaid leave is deducted from payroll."""

    __tablename__ = "leave_request"

    leave_request_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    leave_type: Mapped[str] = mapped_column(String, nullable=False, default="personal")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    days_requested: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    is_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'cancelled')",
            name="leave_request_status_check",
        ),
        CheckConstraint("end_date >= start_date", name="leave_request_dates_check"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="leave_requests")
