"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


# ============================================================================
# Payroll period schemas
# ============================================================================


class PayrollPeriodResponse(BaseModel):
    """Schema for payroll period response."""

    model_config = ConfigDict(from_attributes=True)

    payroll_period_id: UUID
    name: str
    start_date: date
    end_date: date
    pay_date: date | None = None
    status: str
    total_employees: int
    total_gross: Decimal
    total_deductions: Decimal
    total_taxes: Decimal
    total_net: Decimal
    approved_at: datetime | None = None
    approved_by: str | None = None
    closed_at: datetime | None = None
    closed_by: str | None = None


class ApprovalRequest(BaseModel):
    """Schema for approving a payroll period."""

    approved_by: str | None = None


class CloseRequest(BaseModel):
    """Schema for closing a payroll period."""

    closed_by: str | None = None


class EmployeeProcessResult(BaseModel):
    """Outcome for one employee in a period run."""

    employee_id: UUID
    status: Literal["success", "error"]
    payroll_id: UUID | None = None
    net_salary: Decimal | None = None
    message: str | None = None


class PeriodProcessResponse(BaseModel):
    """Schema for a period run response."""

    payroll_period_id: UUID
    status: str
    processed: int
    errors: int
    details: list[EmployeeProcessResult]


# ============================================================================
# Payroll schemas
# ============================================================================


class PayrollDetailResponse(BaseModel):
    """Schema for a payroll detail line."""

    model_config = ConfigDict(from_attributes=True)

    line_number: int
    concept_code: str
    concept_type: str
    quantity: Decimal
    rate: Decimal
    amount: Decimal
    description: str | None = None


class PayrollResponse(BaseModel):
    """Schema for payroll response with detail lines."""

    model_config = ConfigDict(from_attributes=True)

    payroll_id: UUID
    employee_id: UUID
    payroll_period_id: UUID
    payroll_number: str
    base_salary: Decimal
    regular_hours: Decimal
    overtime_hours: Decimal
    worked_days: int
    gross_salary: Decimal
    total_earnings: Decimal
    total_deductions: Decimal
    total_taxes: Decimal
    net_salary: Decimal
    status: str
    calculated_at: datetime | None = None
    details: list[PayrollDetailResponse]


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str | None = None
