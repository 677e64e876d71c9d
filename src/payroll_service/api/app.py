"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payroll_service import __version__
from payroll_service.api.routes import (
    health_router,
    payroll_periods_router,
    payrolls_router,
)
from payroll_service.calculators import InvalidEmployeeDataError
from payroll_service.database import dispose_db, init_db
from payroll_service.services import (
    ConceptNotFoundError,
    InvalidTransitionError,
    PayrollLockedError,
    PeriodLockedError,
)

logger = logging.getLogger(__name__)

# Domain errors mapped to HTTP status and error code
ERROR_STATUS: dict[type[Exception], tuple[int, str]] = {
    InvalidTransitionError: (status.HTTP_409_CONFLICT, "INVALID_TRANSITION"),
    PayrollLockedError: (status.HTTP_409_CONFLICT, "PAYROLL_LOCKED"),
    PeriodLockedError: (status.HTTP_409_CONFLICT, "PERIOD_LOCKED"),
    InvalidEmployeeDataError: (422, "INVALID_EMPLOYEE_DATA"),
    ConceptNotFoundError: (422, "CONCEPT_NOT_FOUND"),
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    init_db()
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Payroll Service API",
        description="Payroll calculation for educational institutions",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Translate domain errors into JSON error responses."""
        status_code, code = next(
            ERROR_STATUS[cls] for cls in type(exc).__mro__ if cls in ERROR_STATUS
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "code": code},
        )

    for exc_class in ERROR_STATUS:
        app.add_exception_handler(exc_class, domain_exception_handler)

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    app.include_router(health_router)
    app.include_router(payroll_periods_router, prefix="/api/v1")
    app.include_router(payrolls_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
