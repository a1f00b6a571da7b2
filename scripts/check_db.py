"""Quick ledger consistency check: each agent's total against their sales."""

import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.config import settings
from src.db import Database
from src.services import AgentService, SalesLedgerService


async def check(fix: bool = False):
    print("Connecting to database...")
    database = Database.from_url(settings.database_url)

    async with database.session() as db:
        agents = await AgentService(db).list_agents()
        ledger = SalesLedgerService(db)

        print(f"\nAgents found: {len(agents)}")
        drifted = 0
        for agent in agents:
            report = await ledger.check_consistency(agent.id)
            mark = "OK" if report.consistent else f"DRIFT {report.drift}"
            print(
                f"  - {agent.name} [{agent.level.value}]: "
                f"recorded {report.recorded_total}, ledger {report.ledger_total} ({mark})"
            )
            if not report.consistent:
                drifted += 1
                if fix:
                    await ledger.reconcile_agent(agent.id)
                    print("    reconciled")

        summary = await ledger.summarize()
        print(
            f"\nSales: {summary.count}, revenue {summary.revenue}, "
            f"agents {summary.agent_earnings}, organization {summary.organization_earnings}"
        )

    await database.dispose()
    print(f"\n{drifted} agent(s) with drift" + (" fixed" if fix and drifted else ""))


if __name__ == "__main__":
    asyncio.run(check(fix="--fix" in sys.argv))
