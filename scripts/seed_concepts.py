"""Seed the standard payroll concept catalog.

Run with:
    python scripts/seed_concepts.py [--create-tables]

Creates every concept code the payroll engine emits (overtime, transport
allowance, health, pension, unpaid leave, income tax). Existing concepts
are left untouched.
"""

from __future__ import annotations

import argparse
import asyncio

from payroll_service.database import dispose_db, get_session, init_db
from payroll_service.models import Base
from payroll_service.services import ConceptCatalog


async def create_tables() -> None:
    """Create all tables that do not exist yet."""
    engine, _ = init_db()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("Tables created")


async def main(create: bool) -> None:
    """Run seed script."""
    if create:
        await create_tables()

    print("Seeding payroll concepts...")

    async with get_session() as session:
        concepts = await ConceptCatalog(session).ensure_standard()
        for concept in concepts:
            print(f"  {concept.code:<22} {concept.concept_type:<10} {concept.name}")

    await dispose_db()
    print("\nDone! Payroll concepts seeded successfully.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="create missing tables before seeding",
    )
    args = parser.parse_args()
    asyncio.run(main(args.create_tables))
