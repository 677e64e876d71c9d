"""Payroll period API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, status

from payroll_service.api.dependencies import Config, DbSession
from payroll_service.api.schemas import (
    ApprovalRequest,
    CloseRequest,
    EmployeeProcessResult,
    ErrorResponse,
    PayrollPeriodResponse,
    PayrollResponse,
    PeriodProcessResponse,
)
from payroll_service.models import Employee, PayrollPeriod
from payroll_service.services import PayrollAssembler, PeriodProcessor

router = APIRouter(prefix="/payroll-periods", tags=["payroll-periods"])


async def _get_period_or_404(db: DbSession, payroll_period_id: UUID) -> PayrollPeriod:
    period = await db.get(PayrollPeriod, payroll_period_id)
    if period is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payroll period not found",
        )
    return period


@router.get(
    "/{payroll_period_id}",
    response_model=PayrollPeriodResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll_period(
    db: DbSession,
    payroll_period_id: Annotated[UUID, Path()],
) -> PayrollPeriodResponse:
    """Get a payroll period with its totals."""
    period = await _get_period_or_404(db, payroll_period_id)
    return PayrollPeriodResponse.model_validate(period)


@router.post(
    "/{payroll_period_id}/process",
    response_model=PeriodProcessResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def process_payroll_period(
    db: DbSession,
    config: Config,
    payroll_period_id: Annotated[UUID, Path()],
) -> PeriodProcessResponse:
    """Calculate payroll for every eligible employee of the period."""
    period = await _get_period_or_404(db, payroll_period_id)

    processor = PeriodProcessor(db, config)
    result = await processor.process_period(period)

    response = PeriodProcessResponse(
        payroll_period_id=period.payroll_period_id,
        status=period.status,
        processed=result.processed,
        errors=result.errors,
        details=[EmployeeProcessResult(**entry) for entry in result.details],
    )
    await db.commit()
    return response


@router.post(
    "/{payroll_period_id}/approve",
    response_model=PayrollPeriodResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def approve_payroll_period(
    db: DbSession,
    config: Config,
    payroll_period_id: Annotated[UUID, Path()],
    request: ApprovalRequest | None = None,
) -> PayrollPeriodResponse:
    """Approve a calculated period and its calculated payrolls."""
    period = await _get_period_or_404(db, payroll_period_id)

    processor = PeriodProcessor(db, config)
    await processor.approve_period(period, request.approved_by if request else None)

    response = PayrollPeriodResponse.model_validate(period)
    await db.commit()
    return response


@router.post(
    "/{payroll_period_id}/close",
    response_model=PayrollPeriodResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def close_payroll_period(
    db: DbSession,
    config: Config,
    payroll_period_id: Annotated[UUID, Path()],
    request: CloseRequest | None = None,
) -> PayrollPeriodResponse:
    """Close an approved period."""
    period = await _get_period_or_404(db, payroll_period_id)

    processor = PeriodProcessor(db, config)
    await processor.close_period(period, request.closed_by if request else None)

    response = PayrollPeriodResponse.model_validate(period)
    await db.commit()
    return response


@router.post(
    "/{payroll_period_id}/employees/{employee_id}/calculate",
    response_model=PayrollResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def calculate_employee_payroll(
    db: DbSession,
    config: Config,
    payroll_period_id: Annotated[UUID, Path()],
    employee_id: Annotated[UUID, Path()],
) -> PayrollResponse:
    """Calculate (or recalculate) one employee's payroll for the period."""
    period = await _get_period_or_404(db, payroll_period_id)
    employee = await db.get(Employee, employee_id)
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found",
        )

    assembler = PayrollAssembler(db, config)
    payroll = await assembler.calculate(employee, period)

    response = PayrollResponse.model_validate(payroll)
    await db.commit()
    return response
