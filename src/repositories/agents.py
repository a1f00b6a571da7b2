"""
Agent persistence.
"""

from decimal import Decimal
from typing import Any, Optional, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from src.models import Agent, AgentLevel

# Columns that may only move through atomic increments
COUNTER_FIELDS = frozenset({"total_sales"})


class AgentRepository:
    """Data access for agents, bound to one session (one unit of work)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, agent_id: int, for_update: bool = False) -> Optional[Agent]:
        """
        Load an agent by ID.

        Args:
            agent_id: Agent ID
            for_update: Lock the row until the transaction ends
                (ignored by SQLite, which locks the whole database on write)
        """
        query = (
            select(Agent)
            .where(Agent.id == agent_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()

        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[Agent]:
        result = await self.db.execute(
            select(Agent).where(Agent.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def find_all(self) -> Sequence[Agent]:
        result = await self.db.execute(
            select(Agent).order_by(Agent.name, Agent.id)
        )
        return result.scalars().all()

    async def create(self, fields: dict[str, Any]) -> Agent:
        agent = Agent(**fields)
        self.db.add(agent)
        await self.db.flush()
        await self.db.refresh(agent)
        return agent

    async def update_fields(self, agent_id: int, fields: dict[str, Any]) -> Optional[Agent]:
        """Set plain fields on an agent. Counters are rejected."""
        counters = COUNTER_FIELDS.intersection(fields)
        if counters:
            raise ValueError(f"Use atomic_increment for {', '.join(sorted(counters))}")

        agent = await self.find(agent_id)
        if not agent:
            return None

        for key, value in fields.items():
            setattr(agent, key, value)

        await self.db.flush()
        await self.db.refresh(agent)
        return agent

    async def atomic_increment(
        self,
        agent_id: int,
        field: str,
        delta: Decimal,
    ) -> Optional[Row]:
        """
        Add delta to a counter column inside the database.

        Runs a single UPDATE ... SET field = field + delta, so concurrent
        sales against one agent cannot lose an increment.

        Returns:
            Row with (id, <field>, level) after the update,
            or None if the agent does not exist
        """
        if field not in COUNTER_FIELDS:
            raise ValueError(f"{field} is not an incrementable field")

        column = getattr(Agent, field)
        result = await self.db.execute(
            update(Agent)
            .where(Agent.id == agent_id)
            .values(**{field: column + delta})
            .returning(Agent.id, column, Agent.level)
            .execution_options(synchronize_session=False)
        )
        return result.one_or_none()

    async def set_total_sales(self, agent_id: int, total: Decimal) -> bool:
        """Overwrite the running total. Only used by reconciliation."""
        result = await self.db.execute(
            update(Agent)
            .where(Agent.id == agent_id)
            .values(total_sales=total)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def set_level(self, agent_id: int, level: AgentLevel) -> bool:
        """Set the tier; returns True if the row changed."""
        result = await self.db.execute(
            update(Agent)
            .where(Agent.id == agent_id, Agent.level != level)
            .values(level=level)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def delete(self, agent_id: int) -> bool:
        result = await self.db.execute(
            delete(Agent)
            .where(Agent.id == agent_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
