"""Tests for employee benefit resolution."""

from decimal import Decimal
from uuid import uuid4

from payroll_service.calculators.benefits import BenefitResolver
from payroll_service.calculators.types import ConceptType
from payroll_service.models import EmployeeBenefit, PayrollConcept


def _benefit(concept_type="earning", amount=None, percentage=None, code="BONIFICACION"):
    concept = PayrollConcept(
        payroll_concept_id=uuid4(),
        code=code,
        name="Bonificación",
        concept_type=concept_type,
    )
    return EmployeeBenefit(
        employee_benefit_id=uuid4(),
        payroll_concept_id=concept.payroll_concept_id,
        payroll_concept=concept,
        amount=Decimal(amount) if amount is not None else None,
        percentage=Decimal(percentage) if percentage is not None else None,
    )


class TestBenefitAmount:
    def test_fixed_amount(self):
        benefit = _benefit(amount="50000")
        assert BenefitResolver.benefit_amount(benefit, Decimal("3000000")) == Decimal("50000")

    def test_percentage_of_base(self):
        benefit = _benefit(percentage="1.5")
        assert BenefitResolver.benefit_amount(benefit, Decimal("2000000")) == Decimal("30000")

    def test_amount_wins_over_percentage(self):
        benefit = _benefit(amount="10", percentage="50")
        assert BenefitResolver.benefit_amount(benefit, Decimal("100")) == Decimal("10")


class TestBuildLines:
    def setup_method(self):
        self.resolver = BenefitResolver(session=None)

    def test_lines_reference_concept_and_benefit(self):
        benefit = _benefit(amount="50000")

        lines = self.resolver.build_lines([benefit], ConceptType.EARNING, Decimal("0"))

        assert len(lines) == 1
        line = lines[0]
        assert line.concept_code == "BONIFICACION"
        assert line.concept_type == ConceptType.EARNING
        assert line.amount == Decimal("50000.00")
        assert line.payroll_concept_id == benefit.payroll_concept_id
        assert line.source_benefit_id == benefit.employee_benefit_id

    def test_other_concept_types_skipped(self):
        lines = self.resolver.build_lines(
            [_benefit(concept_type="deduction", amount="100")],
            ConceptType.EARNING,
            Decimal("0"),
        )
        assert lines == []

    def test_zero_amounts_skipped(self):
        lines = self.resolver.build_lines(
            [_benefit(amount="0"), _benefit(percentage="10")],
            ConceptType.EARNING,
            Decimal("0"),
        )
        assert lines == []

    def test_amounts_rounding_to_zero_skipped(self):
        """0.1% of 1.00 is 0.001, which rounds to 0.00."""
        lines = self.resolver.build_lines(
            [_benefit(percentage="0.1"), _benefit(amount="0.004")],
            ConceptType.EARNING,
            Decimal("1"),
        )
        assert lines == []

    def test_amount_rounding_up_to_a_cent_kept(self):
        lines = self.resolver.build_lines(
            [_benefit(amount="0.005")], ConceptType.EARNING, Decimal("0")
        )
        assert [line.amount for line in lines] == [Decimal("0.01")]

    def test_synthetic_code_when_concept_has_none(self):
        benefit = _benefit(concept_type="deduction", amount="100", code=None)

        lines = self.resolver.build_lines([benefit], ConceptType.DEDUCTION, Decimal("0"))

        assert lines[0].concept_code == f"DEDUCTION_{benefit.employee_benefit_id}"

    def test_synthetic_code_prefix_per_type(self):
        earning = _benefit(code=None)
        tax = _benefit(concept_type="tax", code=None)

        assert BenefitResolver.concept_code_for(earning, ConceptType.EARNING).startswith(
            "BENEFIT_"
        )
        assert BenefitResolver.concept_code_for(tax, ConceptType.TAX).startswith("TAX_")


class TestResolve:
    async def test_only_active_benefits_of_type(self, session, make_employee, add_benefit):
        employee = await make_employee()
        await add_benefit(employee, "earning", amount="50000", code="BONIFICACION")
        await add_benefit(employee, "earning", amount="70000", code="OLD", status="inactive")
        await add_benefit(employee, "deduction", amount="20000", code="PRESTAMO_EMPRESA")

        lines = await BenefitResolver(session).resolve(
            employee.employee_id, ConceptType.EARNING, Decimal("3000000")
        )

        assert [(line.concept_code, line.amount) for line in lines] == [
            ("BONIFICACION", Decimal("50000.00"))
        ]

    async def test_other_employees_benefits_ignored(self, session, make_employee, add_benefit):
        employee = await make_employee()
        other = await make_employee()
        await add_benefit(other, "earning", amount="50000", code="BONIFICACION")

        lines = await BenefitResolver(session).resolve(
            employee.employee_id, ConceptType.EARNING, Decimal("3000000")
        )

        assert lines == []
