"""
Sale persistence.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models import Agent, Sale, SaleStatus


@dataclass
class SaleFilter:
    agent_id: Optional[int] = None
    status: Optional[SaleStatus] = None
    exclude_status: Optional[SaleStatus] = None

    def apply(self, query):
        if self.agent_id is not None:
            query = query.where(Sale.agent_id == self.agent_id)
        if self.status is not None:
            query = query.where(Sale.status == self.status)
        if self.exclude_status is not None:
            query = query.where(Sale.status != self.exclude_status)
        return query


class SaleRepository:
    """Data access for sales, bound to one session (one unit of work)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, sale_id: int) -> Optional[Sale]:
        result = await self.db.execute(
            select(Sale)
            .where(Sale.id == sale_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_all(
        self,
        sale_filter: Optional[SaleFilter] = None,
        newest_first: bool = True,
    ) -> Sequence[Sale]:
        """List sales ordered by sale date."""
        query = (sale_filter or SaleFilter()).apply(select(Sale))
        if newest_first:
            query = query.order_by(Sale.sale_date.desc(), Sale.id.desc())
        else:
            query = query.order_by(Sale.sale_date, Sale.id)

        result = await self.db.execute(query)
        return result.scalars().all()

    async def find_all_with_agents(
        self,
        sale_filter: Optional[SaleFilter] = None,
        newest_first: bool = True,
    ) -> list[tuple[Sale, Optional[Agent]]]:
        """
        List sales together with their live agent.

        Uses an outer join: sales whose agent was deleted come back
        with None instead of being dropped.
        """
        query = (sale_filter or SaleFilter()).apply(
            select(Sale, Agent).outerjoin(Agent, Agent.id == Sale.agent_id)
        )
        if newest_first:
            query = query.order_by(Sale.sale_date.desc(), Sale.id.desc())
        else:
            query = query.order_by(Sale.sale_date, Sale.id)

        result = await self.db.execute(query)
        return [(row.Sale, row.Agent) for row in result.all()]

    async def create(self, fields: dict[str, Any]) -> Sale:
        sale = Sale(**fields)
        self.db.add(sale)
        await self.db.flush()
        await self.db.refresh(sale)
        return sale

    async def update(self, sale_id: int, fields: dict[str, Any]) -> Optional[Sale]:
        sale = await self.find(sale_id)
        if not sale:
            return None

        for key, value in fields.items():
            setattr(sale, key, value)

        await self.db.flush()
        await self.db.refresh(sale)
        return sale

    async def delete(self, sale_id: int) -> bool:
        result = await self.db.execute(
            delete(Sale)
            .where(Sale.id == sale_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def sum_amounts(self, sale_filter: Optional[SaleFilter] = None) -> Decimal:
        """Sum of sale amounts matching the filter."""
        query = (sale_filter or SaleFilter()).apply(
            select(func.coalesce(func.sum(Sale.amount), 0))
        )
        total = await self.db.scalar(query)
        return Decimal(str(total or 0))

    async def totals(self, sale_filter: Optional[SaleFilter] = None):
        """Count, revenue, agent and organization earnings in one query."""
        query = (sale_filter or SaleFilter()).apply(
            select(
                func.count(Sale.id).label("sale_count"),
                func.coalesce(func.sum(Sale.amount), 0).label("revenue"),
                func.coalesce(func.sum(Sale.agent_commission_amount), 0).label("agent_earnings"),
                func.coalesce(func.sum(Sale.organization_commission_amount), 0).label("organization_earnings"),
            )
        )
        result = await self.db.execute(query)
        return result.one()
