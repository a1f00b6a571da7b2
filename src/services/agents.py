"""
Agent account management.

Agents are created and edited by the administrator. The commission split
must add up to 100 after every write; the running sales total belongs to
the sales ledger and cannot be edited here.
"""

import logging
from decimal import Decimal
from typing import Any, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.models import Agent, AgentLevel
from src.repositories import AgentRepository
from src.services.commission import to_decimal, to_money, validate_split
from src.services.exceptions import ConflictError, NotFoundError, ValidationError
from src.services.promotion import evaluate_level
from src.utils.password import hash_password, verify_password

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({
    "name",
    "email",
    "password",
    "level",
    "agent_commission_percentage",
    "organization_commission_percentage",
})


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AgentService:
    """Create, update, delete and authenticate agents."""

    def __init__(
        self,
        db: AsyncSession,
        promotion_threshold: Optional[Decimal] = None,
    ):
        self.db = db
        self.agents = AgentRepository(db)
        self.promotion_threshold = (
            promotion_threshold
            if promotion_threshold is not None
            else settings.promotion_threshold
        )

    async def get_agent(self, agent_id: int) -> Agent:
        agent = await self.agents.find(agent_id)
        if not agent:
            raise NotFoundError("Agent", agent_id)
        return agent

    async def list_agents(self) -> Sequence[Agent]:
        return await self.agents.find_all()

    async def create_agent(
        self,
        name: str,
        email: str,
        password: str,
        level: AgentLevel = AgentLevel.L1,
        total_sales: Decimal = Decimal("0"),
        agent_commission_percentage: Optional[Decimal] = None,
        organization_commission_percentage: Optional[Decimal] = None,
    ) -> Agent:
        """
        Create an agent account.

        Missing percentages default to the configured split (60/40).

        Raises:
            ValidationError: bad split, empty field or negative total
            ConflictError: email already registered
        """
        if agent_commission_percentage is None:
            agent_commission_percentage = settings.default_agent_commission_percentage
        if organization_commission_percentage is None:
            organization_commission_percentage = settings.default_organization_commission_percentage

        agent_pct = to_decimal(agent_commission_percentage)
        org_pct = to_decimal(organization_commission_percentage)
        validate_split(agent_pct, org_pct)

        if not name or not name.strip():
            raise ValidationError("Agent name is required")
        if not email or not email.strip():
            raise ValidationError("Agent email is required")
        if not password:
            raise ValidationError("Agent password is required")

        total = to_money(total_sales)
        if total < 0:
            raise ValidationError("Total sales cannot be negative")

        email = normalize_email(email)
        if await self.agents.find_by_email(email):
            raise ConflictError(f"An agent with email {email} already exists")

        level = AgentLevel(level)
        try:
            agent = await self.agents.create({
                "name": name.strip(),
                "email": email,
                "password_hash": hash_password(password),
                "level": evaluate_level(level, total, self.promotion_threshold),
                "total_sales": total,
                "agent_commission_percentage": agent_pct,
                "organization_commission_percentage": org_pct,
            })
        except IntegrityError as e:
            raise ConflictError(f"An agent with email {email} already exists") from e

        logger.info(f"Agent {agent.id} created ({agent.email}, split {agent_pct}/{org_pct})")
        return agent

    async def update_agent(self, agent_id: int, fields: dict[str, Any]) -> Agent:
        """
        Apply a partial update.

        If only one commission percentage is given it must complement the
        stored one; the other side is never derived automatically.

        Raises:
            NotFoundError: unknown agent
            ValidationError: bad split, unknown field or a demotion
            ConflictError: email taken by another agent
        """
        agent = await self.get_agent(agent_id)

        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        changes: dict[str, Any] = {}

        if "agent_commission_percentage" in fields or "organization_commission_percentage" in fields:
            agent_pct = to_decimal(
                fields.get("agent_commission_percentage", agent.agent_commission_percentage)
            )
            org_pct = to_decimal(
                fields.get("organization_commission_percentage", agent.organization_commission_percentage)
            )
            validate_split(agent_pct, org_pct)
            changes["agent_commission_percentage"] = agent_pct
            changes["organization_commission_percentage"] = org_pct

        if "name" in fields:
            if not fields["name"] or not fields["name"].strip():
                raise ValidationError("Agent name is required")
            changes["name"] = fields["name"].strip()

        if "email" in fields:
            email = normalize_email(fields["email"] or "")
            if not email:
                raise ValidationError("Agent email is required")
            if email != agent.email:
                existing = await self.agents.find_by_email(email)
                if existing and existing.id != agent.id:
                    raise ConflictError(f"An agent with email {email} already exists")
            changes["email"] = email

        if fields.get("password"):
            changes["password_hash"] = hash_password(fields["password"])

        if "level" in fields and fields["level"] is not None:
            level = AgentLevel(fields["level"])
            if agent.level == AgentLevel.L2 and level == AgentLevel.L1:
                raise ValidationError("Agents cannot be demoted from L2 to L1")
            changes["level"] = level

        try:
            agent = await self.agents.update_fields(agent_id, changes)
        except IntegrityError as e:
            raise ConflictError(f"An agent with email {changes.get('email')} already exists") from e

        logger.info(f"Agent {agent_id} updated: {sorted(k for k in changes if k != 'password_hash')}")
        return agent

    async def delete_agent(self, agent_id: int) -> None:
        """Delete an agent. Their sales are kept as orphans."""
        if not await self.agents.delete(agent_id):
            raise NotFoundError("Agent", agent_id)
        logger.info(f"Agent {agent_id} deleted; existing sales are left in the ledger")

    async def authenticate_agent(self, email: str, password: str) -> Optional[Agent]:
        """Return the agent for valid credentials, otherwise None."""
        agent = await self.agents.find_by_email(email)
        if not agent or not verify_password(password, agent.password_hash):
            return None
        return agent
