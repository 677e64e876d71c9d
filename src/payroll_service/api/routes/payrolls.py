"""Payroll API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, status

from payroll_service.api.dependencies import Config, DbSession
from payroll_service.api.schemas import ErrorResponse, PayrollResponse
from payroll_service.services import PayrollAssembler

router = APIRouter(prefix="/payrolls", tags=["payrolls"])


@router.get(
    "/{payroll_id}",
    response_model=PayrollResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll(
    db: DbSession,
    config: Config,
    payroll_id: Annotated[UUID, Path()],
) -> PayrollResponse:
    """Get a payroll with its detail lines."""
    payroll = await PayrollAssembler(db, config).get_payroll(payroll_id)
    if payroll is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payroll not found",
        )
    return PayrollResponse.model_validate(payroll)
