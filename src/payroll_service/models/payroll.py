"""Payroll period, concept, benefit, payroll and detail models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
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
    from payroll_service.models.employee import Employee


# ===== Periods =====


class PayrollPeriod(Base, TimestampMixin):
    """Payroll time window with aggregate totals."""

    __tablename__ = "payroll_period"

    payroll_period_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    pay_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="open")

    total_employees: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_gross: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    total_deductions: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0")
    )
    total_taxes: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    total_net: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=Decimal("0"))

    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String, nullable=True)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    closed_by: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('open', 'calculated', 'approved', 'closed')",
            name="payroll_period_status_check",
        ),
        CheckConstraint("end_date >= start_date", name="payroll_period_dates_check"),
    )

    # Relationships
    payrolls: Mapped[list[Payroll]] = relationship(back_populates="period")


# ===== Concepts & Benefits =====


class PayrollConcept(Base, TimestampMixin):
    """Catalog entry for a payroll line-item category."""

    __tablename__ = "payroll_concept"

    payroll_concept_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    code: Mapped[str | None] = mapped_column(String, nullable=True, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    concept_type: Mapped[str] = mapped_column("type", String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint(
            "type IN ('earning', 'deduction', 'tax')",
            name="payroll_concept_type_check",
        ),
        CheckConstraint(
            "status IN ('active', 'inactive')",
            name="payroll_concept_status_check",
        ),
    )


class EmployeeBenefit(Base, TimestampMixin):
    """Recurring employee-specific earning, deduction or tax.

    Exactly one of ``amount`` (fixed) or ``percentage`` is set.
    """

    __tablename__ = "employee_benefit"

    employee_benefit_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    payroll_concept_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_concept.payroll_concept_id", ondelete="CASCADE"),
        nullable=False,
    )
    amount: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    percentage: Mapped[Decimal | None] = mapped_column(Numeric(7, 4), nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "(amount IS NULL) <> (percentage IS NULL)",
            name="employee_benefit_amount_xor_percentage",
        ),
        CheckConstraint(
            "status IN ('active', 'inactive')",
            name="employee_benefit_status_check",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="benefits")
    payroll_concept: Mapped[PayrollConcept] = relationship()


# ===== Payroll =====


class Payroll(Base, TimestampMixin):
    """Calculated payroll for one employee in one period."""

    __tablename__ = "payroll"

    payroll_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    payroll_period_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_period.payroll_period_id", ondelete="CASCADE"),
        nullable=False,
    )
    payroll_number: Mapped[str] = mapped_column(String, nullable=False, unique=True)

    base_salary: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    regular_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=Decimal("0"))
    overtime_hours: Mapped[Decimal] = mapped_column(
        Numeric(8, 2), nullable=False, default=Decimal("0")
    )
    worked_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    gross_salary: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    total_earnings: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0")
    )
    total_deductions: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0")
    )
    total_taxes: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    net_salary: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=Decimal("0"))

    status: Mapped[str] = mapped_column(String, nullable=False, default="draft")
    calculated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "payroll_period_id", name="payroll_employee_period_unique"),
        CheckConstraint(
            "status IN ('draft', 'calculated', 'approved', 'paid', 'cancelled')",
            name="payroll_status_check",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="payrolls")
    period: Mapped[PayrollPeriod] = relationship(back_populates="payrolls")
    details: Mapped[list[PayrollDetail]] = relationship(
        back_populates="payroll",
        order_by="PayrollDetail.line_number",
        cascade="all, delete-orphan",
    )


class PayrollDetail(Base, TimestampMixin):
    """Payroll line item; regenerated on every calculation pass."""

    __tablename__ = "payroll_detail"

    payroll_detail_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    payroll_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll.payroll_id", ondelete="CASCADE"),
        nullable=False,
    )
    payroll_concept_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_concept.payroll_concept_id"),
        nullable=False,
    )
    line_number: Mapped[int] = mapped_column(Integer, nullable=False)
    concept_code: Mapped[str] = mapped_column(String, nullable=False)
    concept_type: Mapped[str] = mapped_column(String, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("1"))
    rate: Mapped[Decimal] = mapped_column(Numeric(15, 4), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("payroll_id", "line_number", name="payroll_detail_line_unique"),
        CheckConstraint(
            "concept_type IN ('earning', 'deduction', 'tax')",
            name="payroll_detail_concept_type_check",
        ),
    )

    # Relationships
    payroll: Mapped[Payroll] = relationship(back_populates="details")
    payroll_concept: Mapped[PayrollConcept] = relationship()
