"""Registry of payroll concepts keyed by code."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_service.calculators.types import ConceptCode, ConceptType
from payroll_service.models import PayrollConcept

# (code, name, type) for every concept the engine emits itself
STANDARD_CONCEPTS: tuple[tuple[ConceptCode, str, ConceptType], ...] = (
    (ConceptCode.OVERTIME, "Horas Extra", ConceptType.EARNING),
    (ConceptCode.TRANSPORT_ALLOWANCE, "Subsidio de Transporte", ConceptType.EARNING),
    (ConceptCode.HEALTH_CONTRIBUTION, "Salud Empleado (4%)", ConceptType.DEDUCTION),
    (ConceptCode.PENSION_CONTRIBUTION, "Pensión Empleado (4%)", ConceptType.DEDUCTION),
    (ConceptCode.UNPAID_LEAVE, "Licencia no Remunerada", ConceptType.DEDUCTION),
    (ConceptCode.INCOME_TAX, "Retención en la Fuente", ConceptType.TAX),
)


class ConceptNotFoundError(LookupError):
    """Raised when a required concept code is missing from the catalog."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Payroll concept '{code}' not found or inactive")


class ConceptCatalog:
    """Resolves concept codes to active PayrollConcept rows.

    Lookups are cached for the lifetime of the catalog. Unknown codes fail
    fast; concepts are only created through ``ensure`` (seeding).
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._cache: dict[str, PayrollConcept] = {}

    async def resolve(self, code: str) -> PayrollConcept:
        cached = self._cache.get(code)
        if cached is not None:
            return cached

        result = await self.session.execute(
            select(PayrollConcept).where(
                PayrollConcept.code == code,
                PayrollConcept.status == "active",
            )
        )
        concept = result.scalar_one_or_none()
        if concept is None:
            raise ConceptNotFoundError(code)

        self._cache[code] = concept
        return concept

    async def ensure(
        self,
        code: str,
        name: str,
        concept_type: ConceptType,
        display_order: int = 0,
    ) -> PayrollConcept:
        """Return the concept for ``code``, creating it if absent."""
        result = await self.session.execute(
            select(PayrollConcept).where(PayrollConcept.code == code)
        )
        concept = result.scalar_one_or_none()
        if concept is None:
            concept = PayrollConcept(
                code=code,
                name=name,
                concept_type=concept_type.value,
                status="active",
                display_order=display_order,
            )
            self.session.add(concept)
            await self.session.flush()

        self._cache[code] = concept
        return concept

    async def ensure_standard(self) -> list[PayrollConcept]:
        """Create any missing standard concept."""
        return [
            await self.ensure(code.value, name, concept_type, display_order=order)
            for order, (code, name, concept_type) in enumerate(STANDARD_CONCEPTS, start=1)
        ]
