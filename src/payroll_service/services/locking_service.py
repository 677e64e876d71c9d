"""Per-period lock serializing batch runs and period-total writes."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_service.database import try_advisory_xact_lock


class PeriodLockedError(Exception):
    """Raised when a period is already being processed."""

    def __init__(self, payroll_period_id: UUID):
        self.payroll_period_id = payroll_period_id
        super().__init__(f"Payroll period {payroll_period_id} is already being processed")


class PeriodLockService:
    """Non-blocking lock keyed on the payroll period id.

    On PostgreSQL this is a transaction-level advisory lock: it also holds
    across processes and stays taken until the session's transaction ends,
    so period totals are written under it. Other dialects (SQLite in tests)
    fall back to an in-process ``asyncio.Lock`` per period.
    """

    _local_locks: dict[UUID, asyncio.Lock] = {}

    def __init__(self, session: AsyncSession):
        self.session = session

    @property
    def uses_advisory_lock(self) -> bool:
        return self.session.get_bind().dialect.name == "postgresql"

    @asynccontextmanager
    async def hold(self, payroll_period_id: UUID) -> AsyncIterator[None]:
        """Hold the period lock, raising PeriodLockedError if already taken."""
        key = f"payroll_period:{payroll_period_id}"

        if self.uses_advisory_lock:
            if not await try_advisory_xact_lock(self.session, key):
                raise PeriodLockedError(payroll_period_id)
            yield
            return

        lock = self._local_locks.setdefault(payroll_period_id, asyncio.Lock())
        if lock.locked():
            raise PeriodLockedError(payroll_period_id)
        async with lock:
            yield
