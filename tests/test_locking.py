"""Tests for the period lock."""

from types import SimpleNamespace
from uuid import uuid4

import pytest

from payroll_service.services.locking_service import PeriodLockedError, PeriodLockService


class RecordingPostgresSession:
    """Session double reporting the postgresql dialect and recording SQL."""

    def __init__(self, acquired: bool = True):
        self.acquired = acquired
        self.statements: list[str] = []

    def get_bind(self):
        return SimpleNamespace(dialect=SimpleNamespace(name="postgresql"))

    async def execute(self, statement, params=None):
        self.statements.append(str(statement))
        return SimpleNamespace(scalar=lambda: self.acquired)


class TestPeriodLockService:
    async def test_second_holder_is_rejected(self, session):
        service = PeriodLockService(session)
        period_id = uuid4()

        async with service.hold(period_id):
            with pytest.raises(PeriodLockedError) as exc_info:
                async with PeriodLockService(session).hold(period_id):
                    pass

        assert exc_info.value.payroll_period_id == period_id

    async def test_lock_released_after_block(self, session):
        service = PeriodLockService(session)
        period_id = uuid4()

        async with service.hold(period_id):
            pass
        async with service.hold(period_id):
            pass

    async def test_lock_released_on_error(self, session):
        service = PeriodLockService(session)
        period_id = uuid4()

        with pytest.raises(RuntimeError):
            async with service.hold(period_id):
                raise RuntimeError("boom")

        async with service.hold(period_id):
            pass

    async def test_different_periods_do_not_conflict(self, session):
        service = PeriodLockService(session)

        async with service.hold(uuid4()):
            async with service.hold(uuid4()):
                pass

    async def test_sqlite_uses_process_local_lock(self, session):
        assert not PeriodLockService(session).uses_advisory_lock


class TestAdvisoryLock:
    """PostgreSQL path: transaction-scoped advisory lock."""

    async def test_takes_transaction_level_lock(self):
        session = RecordingPostgresSession()

        async with PeriodLockService(session).hold(uuid4()):
            pass

        assert len(session.statements) == 1
        assert "pg_try_advisory_xact_lock" in session.statements[0]

    async def test_error_propagates_without_unlock_statement(self):
        """An aborted transaction releases the lock; nothing runs after the error."""
        session = RecordingPostgresSession()

        with pytest.raises(RuntimeError, match="flush failed"):
            async with PeriodLockService(session).hold(uuid4()):
                raise RuntimeError("flush failed")

        assert len(session.statements) == 1
        assert not any("unlock" in statement for statement in session.statements)

    async def test_busy_lock_raises(self):
        session = RecordingPostgresSession(acquired=False)
        period_id = uuid4()

        with pytest.raises(PeriodLockedError) as exc_info:
            async with PeriodLockService(session).hold(period_id):
                pass

        assert exc_info.value.payroll_period_id == period_id
