"""Tests for attendance aggregation."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from payroll_service.calculators.attendance import AttendanceAggregator
from payroll_service.config import PayrollConfig


def _records(*hours):
    return [SimpleNamespace(total_hours=Decimal(h) if h is not None else None) for h in hours]


class TestSummarize:
    """Regular/overtime split of present days."""

    def setup_method(self):
        self.aggregator = AttendanceAggregator(session=None, config=PayrollConfig())

    def test_standard_days_are_regular(self):
        hours = self.aggregator.summarize(_records("8", "8", "8"))

        assert hours.regular_hours == Decimal("24")
        assert hours.overtime_hours == Decimal("0")
        assert hours.worked_days == 3
        assert hours.total_days == 3

    def test_excess_over_standard_is_overtime(self):
        """A 10h day is 8h regular plus 2h overtime."""
        hours = self.aggregator.summarize(_records("10", "8"))

        assert hours.regular_hours == Decimal("16")
        assert hours.overtime_hours == Decimal("2")
        assert hours.worked_hours == Decimal("18")

    def test_short_day_counts_fully_as_regular(self):
        hours = self.aggregator.summarize(_records("4.5"))

        assert hours.regular_hours == Decimal("4.5")
        assert hours.overtime_hours == Decimal("0")

    def test_missing_hours_count_as_zero(self):
        """A present day without hours still counts as a worked day."""
        hours = self.aggregator.summarize(_records(None))

        assert hours.regular_hours == Decimal("0")
        assert hours.worked_days == 1

    def test_overtime_split_property(self):
        """Every day splits into min(h, standard) and max(0, h - standard)."""
        daily = ["0", "3", "8", "8.01", "12", "16"]
        hours = self.aggregator.summarize(_records(*daily))

        expected_regular = sum(min(Decimal(h), Decimal("8")) for h in daily)
        expected_overtime = sum(max(Decimal("0"), Decimal(h) - 8) for h in daily)
        assert hours.regular_hours == expected_regular
        assert hours.overtime_hours == expected_overtime

    def test_empty_period(self):
        hours = self.aggregator.summarize([])

        assert hours.regular_hours == Decimal("0")
        assert hours.worked_days == 0

    def test_custom_standard_day(self):
        aggregator = AttendanceAggregator(
            session=None, config=PayrollConfig(standard_working_hours=Decimal("6"))
        )
        hours = aggregator.summarize(_records("8"))

        assert hours.regular_hours == Decimal("6")
        assert hours.overtime_hours == Decimal("2")


class TestAggregate:
    """Database-backed aggregation."""

    async def test_only_present_days_in_range_count(
        self, session, config, make_employee, add_attendance
    ):
        employee = await make_employee()
        await add_attendance(employee, days=3, hours="9")
        await add_attendance(employee, days=2, start=date(2025, 3, 10), status="absent")
        await add_attendance(employee, days=1, start=date(2025, 3, 12), status="holiday")
        # Outside the window
        await add_attendance(employee, days=1, start=date(2025, 4, 1))

        hours = await AttendanceAggregator(session, config).aggregate(
            employee.employee_id, date(2025, 3, 1), date(2025, 3, 31)
        )

        assert hours.worked_days == 3
        assert hours.regular_hours == Decimal("24")
        assert hours.overtime_hours == Decimal("3")

    async def test_no_attendance(self, session, config, make_employee):
        employee = await make_employee()

        hours = await AttendanceAggregator(session, config).aggregate(
            employee.employee_id, date(2025, 3, 1), date(2025, 3, 31)
        )

        assert hours.worked_days == 0
        assert hours.worked_hours == Decimal("0")
