"""
Sales ledger.

Records, edits and deletes sales and keeps each agent's running total in
step with the ledger:

1. Lock the agent row and read its current commission split
2. Compute the split for the sale amount
3. Write the sale with the split snapshotted on it
4. Move agent.total_sales with an atomic SQL increment
5. Re-check the promotion rule on the new total

Everything runs in the caller's session, so the sale write and the total
update commit or roll back together.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Optional, Sequence, Union

from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.models import Agent, Sale, SaleStatus
from src.repositories import AgentRepository, SaleFilter, SaleRepository
from src.services.commission import ZERO, compute_commissions, to_money
from src.services.exceptions import ConsistencyError, NotFoundError, ValidationError
from src.services.promotion import evaluate_level

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({
    "agent_id",
    "customer_name",
    "product_name",
    "description",
    "amount",
    "sale_date",
    "notes",
    "status",
})


@dataclass
class SalesSummary:
    """Aggregated commission split over a set of sales."""

    count: int
    revenue: Decimal
    agent_earnings: Decimal
    organization_earnings: Decimal


@dataclass
class ConsistencyReport:
    """Agent running total compared with the ledger."""

    agent_id: int
    recorded_total: Decimal
    ledger_total: Decimal

    @property
    def drift(self) -> Decimal:
        return self.recorded_total - self.ledger_total

    @property
    def consistent(self) -> bool:
        return self.drift == 0


def as_sale_datetime(value: Union[date, datetime, None]) -> datetime:
    """Sale dates arrive as ISO dates or datetimes; store timezone-aware datetimes."""
    if value is None:
        return datetime.now(timezone.utc)
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _require_text(value: Optional[str], label: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} is required")
    return str(value).strip()


def _require_amount(value: Any) -> Decimal:
    if value is None:
        raise ValidationError("Amount is required")
    amount = to_money(value)
    if amount < 0:
        raise ValidationError(f"Amount cannot be negative, got {amount}")
    return amount


class SalesLedgerService:
    """Sale writes with their side effects on agent totals and tiers."""

    def __init__(
        self,
        db: AsyncSession,
        promotion_threshold: Optional[Decimal] = None,
        count_cancelled_sales: Optional[bool] = None,
    ):
        self.db = db
        self.agents = AgentRepository(db)
        self.sales = SaleRepository(db)
        self.promotion_threshold = (
            promotion_threshold
            if promotion_threshold is not None
            else settings.promotion_threshold
        )
        self.count_cancelled_sales = (
            count_cancelled_sales
            if count_cancelled_sales is not None
            else settings.count_cancelled_sales
        )

    # ── Policy ────────────────────────────────────────────

    def counted_amount(self, status: SaleStatus, amount: Decimal) -> Decimal:
        """Part of a sale that counts toward the agent's total."""
        if status == SaleStatus.CANCELLED and not self.count_cancelled_sales:
            return ZERO
        return amount

    def _ledger_filter(self, agent_id: Optional[int] = None) -> SaleFilter:
        return SaleFilter(
            agent_id=agent_id,
            exclude_status=None if self.count_cancelled_sales else SaleStatus.CANCELLED,
        )

    async def _adjust_total(
        self,
        agent_id: int,
        delta: Decimal,
        required: bool = False,
    ) -> None:
        """
        Move an agent's total by delta and apply the promotion rule.

        A missing agent is an orphaned sale: skipped with a warning,
        unless the caller has just locked that agent (required=True).
        """
        if delta == 0:
            return

        row = await self.agents.atomic_increment(agent_id, "total_sales", delta)
        if row is None:
            if required:
                logger.error(
                    f"Agent {agent_id} disappeared before its total could be "
                    f"adjusted by {delta}; rolling back"
                )
                raise ConsistencyError(
                    f"Could not update total sales for agent {agent_id}"
                )
            logger.warning(
                f"Agent {agent_id} no longer exists; skipped total adjustment of {delta}"
            )
            return

        new_level = evaluate_level(row.level, row.total_sales, self.promotion_threshold)
        if new_level != row.level:
            await self.agents.set_level(agent_id, new_level)
            logger.info(
                f"Agent {agent_id} promoted {row.level.value} -> {new_level.value} "
                f"(total sales {row.total_sales})"
            )

    # ── Reads ─────────────────────────────────────────────

    async def get_sale(self, sale_id: int) -> Sale:
        sale = await self.sales.find(sale_id)
        if not sale:
            raise NotFoundError("Sale", sale_id)
        return sale

    async def get_sale_with_agent(self, sale_id: int) -> tuple[Sale, Optional[Agent]]:
        """A sale and its live agent (None if the agent was deleted)."""
        sale = await self.get_sale(sale_id)
        return sale, await self.agents.find(sale.agent_id)

    async def list_sales(
        self,
        agent_id: Optional[int] = None,
        status: Optional[SaleStatus] = None,
        newest_first: bool = True,
    ) -> list[tuple[Sale, Optional[Agent]]]:
        """Sales with their live agent (None for orphans)."""
        return await self.sales.find_all_with_agents(
            SaleFilter(agent_id=agent_id, status=status),
            newest_first=newest_first,
        )

    async def list_agent_sales(self, agent_id: int) -> Sequence[Sale]:
        return await self.sales.find_all(SaleFilter(agent_id=agent_id))

    async def summarize(self, agent_id: Optional[int] = None) -> SalesSummary:
        """Revenue and commission totals, optionally for one agent."""
        row = await self.sales.totals(self._ledger_filter(agent_id))
        return SalesSummary(
            count=row.sale_count or 0,
            revenue=to_money(row.revenue or 0),
            agent_earnings=to_money(row.agent_earnings or 0),
            organization_earnings=to_money(row.organization_earnings or 0),
        )

    # ── Writes ────────────────────────────────────────────

    async def record_sale(
        self,
        agent_id: int,
        customer_name: str,
        product_name: str,
        amount: Decimal,
        sale_date: Union[date, datetime, None] = None,
        notes: Optional[str] = None,
        status: SaleStatus = SaleStatus.PENDING,
        description: Optional[str] = None,
    ) -> Sale:
        """
        Record a sale for an agent.

        Raises:
            ValidationError: negative amount or missing field
            NotFoundError: unknown agent; nothing is written
        """
        amount = _require_amount(amount)
        customer_name = _require_text(customer_name, "Customer name")
        product_name = _require_text(product_name, "Product name")
        status = SaleStatus(status)

        agent = await self.agents.find(agent_id, for_update=True)
        if not agent:
            raise NotFoundError("Agent", agent_id)

        split = compute_commissions(
            amount,
            agent.agent_commission_percentage,
            agent.organization_commission_percentage,
        )

        sale = await self.sales.create({
            "agent_id": agent.id,
            "agent_name": agent.name,
            "customer_name": customer_name,
            "product_name": product_name,
            "description": description or product_name,
            "notes": notes,
            "amount": amount,
            "sale_date": as_sale_datetime(sale_date),
            "status": status,
            "agent_commission_percentage": agent.agent_commission_percentage,
            "organization_commission_percentage": agent.organization_commission_percentage,
            "agent_commission_amount": split.agent_amount,
            "organization_commission_amount": split.org_amount,
        })

        await self._adjust_total(agent.id, self.counted_amount(status, amount), required=True)

        logger.info(
            f"Sale {sale.id} recorded for agent {agent.id}: {amount} "
            f"(agent {split.agent_amount} / org {split.org_amount})"
        )
        return sale

    async def edit_sale(self, sale_id: int, fields: dict[str, Any]) -> Sale:
        """
        Edit a sale, re-deriving its commission from the agent it belongs
        to after the edit.

        Moving a sale to another agent takes its amount off the old agent
        and adds the new amount to the new one.

        Raises:
            NotFoundError: unknown sale, or unknown new agent
            ValidationError: bad field values
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")

        sale = await self.get_sale(sale_id)

        old_agent_id = sale.agent_id
        old_counted = self.counted_amount(sale.status, sale.amount)

        new_agent_id = fields.get("agent_id") or old_agent_id
        new_amount = _require_amount(fields["amount"]) if "amount" in fields else sale.amount
        new_status = SaleStatus(fields["status"]) if fields.get("status") else sale.status

        # Lock in ID order so two edits moving sales between the same
        # pair of agents cannot deadlock.
        locked: dict[int, Optional[Agent]] = {}
        for aid in sorted({old_agent_id, new_agent_id}):
            locked[aid] = await self.agents.find(aid, for_update=True)

        agent = locked[new_agent_id]
        if agent is None and new_agent_id != old_agent_id:
            raise NotFoundError("Agent", new_agent_id)

        changes: dict[str, Any] = {
            "agent_id": new_agent_id,
            "amount": new_amount,
            "status": new_status,
        }
        for key in ("customer_name", "product_name"):
            if key in fields:
                changes[key] = _require_text(fields[key], key.replace("_", " ").capitalize())
        if "description" in fields:
            changes["description"] = fields["description"]
        if "notes" in fields:
            changes["notes"] = fields["notes"]
        if fields.get("sale_date"):
            changes["sale_date"] = as_sale_datetime(fields["sale_date"])

        if agent is not None:
            agent_pct = agent.agent_commission_percentage
            org_pct = agent.organization_commission_percentage
            changes["agent_name"] = agent.name
            changes["agent_commission_percentage"] = agent_pct
            changes["organization_commission_percentage"] = org_pct
        else:
            # Orphaned sale: keep the split it was recorded with
            logger.warning(
                f"Sale {sale_id} belongs to deleted agent {old_agent_id}; "
                f"keeping its commission snapshot"
            )
            agent_pct = sale.agent_commission_percentage
            org_pct = sale.organization_commission_percentage

        split = compute_commissions(new_amount, agent_pct, org_pct)
        changes["agent_commission_amount"] = split.agent_amount
        changes["organization_commission_amount"] = split.org_amount

        sale = await self.sales.update(sale_id, changes)

        new_counted = self.counted_amount(new_status, new_amount)
        if new_agent_id == old_agent_id:
            await self._adjust_total(old_agent_id, new_counted - old_counted)
        else:
            await self._adjust_total(old_agent_id, -old_counted)
            await self._adjust_total(new_agent_id, new_counted, required=True)

        logger.info(
            f"Sale {sale_id} edited: agent {old_agent_id} -> {new_agent_id}, "
            f"counted amount {old_counted} -> {new_counted}"
        )
        return sale

    async def delete_sale(self, sale_id: int) -> Sale:
        """
        Delete a sale and take its amount off the agent's total.

        The agent keeps their tier even if the total drops below the
        promotion threshold.
        """
        sale = await self.get_sale(sale_id)
        counted = self.counted_amount(sale.status, sale.amount)

        await self.sales.delete(sale_id)
        await self._adjust_total(sale.agent_id, -counted)

        logger.info(f"Sale {sale_id} deleted; agent {sale.agent_id} total reduced by {counted}")
        return sale

    # ── Reconciliation ────────────────────────────────────

    async def check_consistency(self, agent_id: int) -> ConsistencyReport:
        """Compare an agent's running total with the sum of their sales."""
        agent = await self.agents.find(agent_id)
        if not agent:
            raise NotFoundError("Agent", agent_id)

        ledger_total = await self.sales.sum_amounts(self._ledger_filter(agent_id))
        report = ConsistencyReport(
            agent_id=agent_id,
            recorded_total=to_money(agent.total_sales),
            ledger_total=to_money(ledger_total),
        )
        if not report.consistent:
            logger.warning(
                f"Agent {agent_id} total {report.recorded_total} differs from "
                f"ledger {report.ledger_total} by {report.drift}"
            )
        return report

    async def reconcile_agent(self, agent_id: int) -> ConsistencyReport:
        """
        Reset an agent's total to the ledger sum.

        Returns the report from before the fix. The tier rule is applied
        to the corrected total; it never demotes.
        """
        report = await self.check_consistency(agent_id)
        if report.consistent:
            return report

        agent = await self.agents.find(agent_id, for_update=True)
        await self.agents.set_total_sales(agent_id, report.ledger_total)

        new_level = evaluate_level(agent.level, report.ledger_total, self.promotion_threshold)
        if new_level != agent.level:
            await self.agents.set_level(agent_id, new_level)

        logger.warning(
            f"Agent {agent_id} reconciled: total {report.recorded_total} -> "
            f"{report.ledger_total}"
        )
        return report
