"""Pytest fixtures for payroll service tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from payroll_service.config import PayrollConfig
from payroll_service.models import (
    Attendance,
    Base,
    Employee,
    EmployeeBenefit,
    EmployeePosition,
    LeaveRequest,
    PayrollConcept,
    PayrollPeriod,
    Position,
)
from payroll_service.services import ConceptCatalog

# In-memory SQLite shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"

PERIOD_START = date(2025, 3, 1)
PERIOD_END = date(2025, 3, 31)


@pytest.fixture
async def engine():
    """Create a fresh test database engine per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; emit BEGIN ourselves
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def config() -> PayrollConfig:
    return PayrollConfig()


@pytest.fixture
async def concepts(session: AsyncSession) -> dict[str, PayrollConcept]:
    """Seed the standard concept catalog."""
    seeded = await ConceptCatalog(session).ensure_standard()
    return {concept.code: concept for concept in seeded}


@pytest.fixture
async def period(session: AsyncSession) -> PayrollPeriod:
    """An open March 2025 payroll period."""
    period = PayrollPeriod(
        name="March 2025",
        start_date=PERIOD_START,
        end_date=PERIOD_END,
        pay_date=PERIOD_END,
        status="open",
    )
    session.add(period)
    await session.flush()
    return period


@pytest.fixture
async def position(session: AsyncSession) -> Position:
    position = Position(code="INSTRUCTOR", title="Instructor")
    session.add(position)
    await session.flush()
    return position


@pytest.fixture
def make_employee(
    session: AsyncSession, position: Position
) -> Callable[..., Awaitable[Employee]]:
    """Factory for employees with a current position assignment."""
    counter = iter(range(1, 10_000))

    async def _make(
        base_salary: Decimal | str = Decimal("3000000"),
        salary_type: str = "monthly",
        hourly_rate: Decimal | None = None,
        status: str = "active",
        with_position: bool = True,
        position_start: date = date(2024, 1, 15),
    ) -> Employee:
        number = next(counter)
        employee = Employee(
            employee_number=f"EMP{number:04d}",
            first_name="Test",
            last_name=f"Employee {number}",
            email=f"employee{number}@school.test",
            hire_date=position_start,
            base_salary=Decimal(base_salary),
            salary_type=salary_type,
            hourly_rate=hourly_rate,
            status=status,
        )
        session.add(employee)
        await session.flush()

        if with_position:
            session.add(
                EmployeePosition(
                    employee_id=employee.employee_id,
                    position_id=position.position_id,
                    start_date=position_start,
                    status="active",
                )
            )
            await session.flush()
        return employee

    return _make


@pytest.fixture
def add_attendance(session: AsyncSession) -> Callable[..., Awaitable[list[Attendance]]]:
    """Factory for consecutive present days starting at the period start."""

    async def _add(
        employee: Employee,
        days: int = 22,
        hours: Decimal | str = Decimal("8"),
        start: date = PERIOD_START,
        status: str = "present",
    ) -> list[Attendance]:
        records = [
            Attendance(
                employee_id=employee.employee_id,
                work_date=start + timedelta(days=offset),
                total_hours=Decimal(hours),
                status=status,
            )
            for offset in range(days)
        ]
        session.add_all(records)
        await session.flush()
        return records

    return _add


@pytest.fixture
def add_unpaid_leave(session: AsyncSession) -> Callable[..., Awaitable[LeaveRequest]]:
    async def _add(
        employee: Employee,
        days: int,
        start: date = date(2025, 3, 24),
        status: str = "approved",
        is_paid: bool = False,
    ) -> LeaveRequest:
        leave = LeaveRequest(
            employee_id=employee.employee_id,
            leave_type="personal",
            start_date=start,
            end_date=start + timedelta(days=days - 1),
            days_requested=days,
            status=status,
            is_paid=is_paid,
        )
        session.add(leave)
        await session.flush()
        return leave

    return _add


@pytest.fixture
def add_benefit(session: AsyncSession) -> Callable[..., Awaitable[EmployeeBenefit]]:
    """Factory for a benefit with its own concept."""

    async def _add(
        employee: Employee,
        concept_type: str,
        amount: Decimal | str | None = None,
        percentage: Decimal | str | None = None,
        code: str | None = None,
        name: str = "Benefit",
        status: str = "active",
    ) -> EmployeeBenefit:
        concept = PayrollConcept(
            code=code,
            name=name,
            concept_type=concept_type,
            status="active",
        )
        session.add(concept)
        await session.flush()

        benefit = EmployeeBenefit(
            employee_benefit_id=uuid4(),
            employee_id=employee.employee_id,
            payroll_concept_id=concept.payroll_concept_id,
            amount=Decimal(amount) if amount is not None else None,
            percentage=Decimal(percentage) if percentage is not None else None,
            status=status,
        )
        session.add(benefit)
        await session.flush()
        return benefit

    return _add
