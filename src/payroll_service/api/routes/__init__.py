"""API routes."""

from payroll_service.api.routes.health import router as health_router
from payroll_service.api.routes.payroll_periods import router as payroll_periods_router
from payroll_service.api.routes.payrolls import router as payrolls_router

__all__ = ["health_router", "payroll_periods_router", "payrolls_router"]
