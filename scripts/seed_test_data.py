"""
Seed test data for the realty commission tracker.

Usage:
    python scripts/seed_test_data.py

Or with custom DATABASE_URL:
    DATABASE_URL="postgresql://..." python scripts/seed_test_data.py

This script creates:
- Three agents with different commission splits
- Sales in every status, one agent pushed past the L2 threshold
"""

import asyncio
import os
import sys
from datetime import date, timedelta
from decimal import Decimal

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.config import settings
from src.db import Database
from src.models import Base, SaleStatus
from src.repositories import AgentRepository
from src.services import AgentService, SalesLedgerService


# ===== TEST DATA =====

TEST_PASSWORD = "test123"

TEST_AGENTS = [
    {"name": "Alice Moreau", "email": "alice@example.com", "split": (Decimal("60"), Decimal("40"))},
    {"name": "Bruno Silva", "email": "bruno@example.com", "split": (Decimal("70"), Decimal("30"))},
    {"name": "Chen Wei", "email": "chen@example.com", "split": (Decimal("50"), Decimal("50"))},
]

TEST_PROPERTIES = [
    ("Riverside loft, 2BR", Decimal("185000")),
    ("Suburban family house", Decimal("420000")),
    ("Downtown office unit", Decimal("275000")),
    ("Lakeview plot", Decimal("95000")),
    ("Garden duplex", Decimal("310000")),
]

TEST_CUSTOMERS = ["J. Carter", "M. Novak", "S. Okafor", "L. Dubois", "R. Tanaka"]


async def create_test_agents(agents: AgentService) -> list:
    """Create test agents, reusing any that already exist."""
    created = []
    repo = AgentRepository(agents.db)
    for data in TEST_AGENTS:
        agent = await repo.find_by_email(data["email"])
        if agent:
            print(f"  Agent exists: {agent.email}")
        else:
            agent_pct, org_pct = data["split"]
            agent = await agents.create_agent(
                name=data["name"],
                email=data["email"],
                password=TEST_PASSWORD,
                agent_commission_percentage=agent_pct,
                organization_commission_percentage=org_pct,
            )
            print(f"  Created agent: {agent.email} ({agent_pct}/{org_pct})")
        created.append(agent)
    return created


async def create_test_sales(ledger: SalesLedgerService, agents: list) -> int:
    """Record a spread of sales across the test agents."""
    statuses = [SaleStatus.COMPLETED, SaleStatus.PENDING, SaleStatus.COMPLETED, SaleStatus.CANCELLED]
    count = 0
    today = date.today()

    for i, (product, amount) in enumerate(TEST_PROPERTIES):
        agent = agents[i % len(agents)]
        sale = await ledger.record_sale(
            agent_id=agent.id,
            customer_name=TEST_CUSTOMERS[i % len(TEST_CUSTOMERS)],
            product_name=product,
            amount=amount,
            sale_date=today - timedelta(days=7 * i),
            status=statuses[i % len(statuses)],
        )
        print(
            f"  Sale {sale.id}: {product} for {amount} by {agent.name} "
            f"(agent {sale.agent_commission_amount} / org {sale.organization_commission_amount})"
        )
        count += 1

    # Push the first agent over the promotion threshold
    top_agent = agents[0]
    sale = await ledger.record_sale(
        agent_id=top_agent.id,
        customer_name="Harbor Holdings",
        product_name="Waterfront penthouse",
        amount=settings.promotion_threshold,
        status=SaleStatus.COMPLETED,
    )
    print(f"  Sale {sale.id}: penthouse for {sale.amount} by {top_agent.name}")
    return count + 1


async def main():
    database = Database.from_url(settings.database_url)

    print("Ensuring tables exist...")
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with database.session() as db:
        print("\nCreating agents...")
        agents = await create_test_agents(AgentService(db))

        print("\nRecording sales...")
        ledger = SalesLedgerService(db)
        count = await create_test_sales(ledger, agents)

        print("\nAgent totals:")
        for agent in await AgentService(db).list_agents():
            print(f"  {agent.name}: {agent.total_sales} [{agent.level.value}]")

    await database.dispose()
    print(f"\nDone: {count} sales recorded.")


if __name__ == "__main__":
    asyncio.run(main())
