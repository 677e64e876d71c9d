"""Tests for line item builder."""

from decimal import Decimal
from uuid import uuid4

from payroll_service.calculators.line_builder import LineItemBuilder
from payroll_service.calculators.types import ConceptType, LineCandidate


class TestLineItemBuilder:
    """Test line item builder functionality."""

    def test_round_to_cents(self):
        """Test rounding to 2 decimal places."""
        assert LineItemBuilder.round_to_cents(Decimal("10.125")) == Decimal("10.13")
        assert LineItemBuilder.round_to_cents(Decimal("10.124")) == Decimal("10.12")

        # Half-up rounding
        assert LineItemBuilder.round_to_cents(Decimal("10.135")) == Decimal("10.14")

    def test_round_rate_keeps_four_decimals(self):
        assert LineItemBuilder.round_rate(Decimal("15625.123456")) == Decimal("15625.1235")

    def test_create_earning_line(self):
        """Earning line keeps quantity and rate."""
        line = LineItemBuilder.create_earning_line(
            "HORAS_EXTRA",
            amount=Decimal("31250"),
            quantity=Decimal("2"),
            rate=Decimal("15625"),
            explanation="Overtime",
        )

        assert line.concept_type == ConceptType.EARNING
        assert line.concept_code == "HORAS_EXTRA"
        assert line.amount == Decimal("31250.00")
        assert line.quantity == Decimal("2")
        assert line.rate == Decimal("15625.0000")
        assert line.explanation == "Overtime"

    def test_create_deduction_line_is_positive(self):
        """Deduction amounts are stored positive."""
        line = LineItemBuilder.create_deduction_line("SALUD_EMP", Decimal("-120000"))

        assert line.concept_type == ConceptType.DEDUCTION
        assert line.amount == Decimal("120000.00")
        assert line.amount > 0

    def test_rate_defaults_to_amount(self):
        line = LineItemBuilder.create_tax_line("RETENCION_FUENTE", Decimal("1552460"))

        assert line.concept_type == ConceptType.TAX
        assert line.quantity == Decimal("1")
        assert line.rate == line.amount

    def test_create_line_carries_benefit_source(self):
        concept_id = uuid4()
        benefit_id = uuid4()
        line = LineItemBuilder.create_line(
            ConceptType.EARNING,
            "BONIFICACION",
            Decimal("50000"),
            payroll_concept_id=concept_id,
            source_benefit_id=benefit_id,
        )

        assert line.payroll_concept_id == concept_id
        assert line.source_benefit_id == benefit_id

    def test_sum_by_type(self):
        """Test summing lines by type."""
        lines = [
            LineItemBuilder.create_earning_line("HORAS_EXTRA", Decimal("1000")),
            LineItemBuilder.create_earning_line("SUBSIDIO_TRANSPORTE", Decimal("500")),
            LineItemBuilder.create_deduction_line("SALUD_EMP", Decimal("100")),
            LineItemBuilder.create_tax_line("RETENCION_FUENTE", Decimal("200")),
        ]

        totals = LineItemBuilder.sum_by_type(lines)

        assert totals[ConceptType.EARNING] == Decimal("1500.00")
        assert totals[ConceptType.DEDUCTION] == Decimal("100.00")
        assert totals[ConceptType.TAX] == Decimal("200.00")

    def test_calculate_net(self):
        """NET = GROSS - DEDUCTIONS - TAXES."""
        net = LineItemBuilder.calculate_net(
            Decimal("3000000"), Decimal("240000"), Decimal("1552460")
        )
        assert net == Decimal("1207540.00")

    def test_validate_lines_flags_zero_amounts(self):
        lines = [
            LineItemBuilder.create_earning_line("HORAS_EXTRA", Decimal("10")),
            LineCandidate(
                concept_type=ConceptType.DEDUCTION,
                concept_code="SALUD_EMP",
                amount=Decimal("0"),
            ),
        ]

        errors = LineItemBuilder.validate_lines(lines)

        assert len(errors) == 1
        assert "SALUD_EMP" in errors[0]
