"""
Agent model: salesperson with a commission split and a running sales total.
"""

from decimal import Decimal
from enum import Enum

from sqlalchemy import CheckConstraint, String
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import MONEY, PERCENT, Base, TimestampMixin


class AgentLevel(str, Enum):
    """Agent tier. Promotion is one-way: L1 -> L2."""
    L1 = "L1"
    L2 = "L2"


class Agent(Base, TimestampMixin):
    """
    Sales agent account.

    - total_sales mirrors the sum of the agent's sale amounts and is only
      changed through atomic increments by the sales ledger
    - the two commission percentages always add up to 100
    """

    __tablename__ = "agents"
    __table_args__ = (
        CheckConstraint(
            "agent_commission_percentage + organization_commission_percentage = 100",
            name="ck_agents_commission_split",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    level: Mapped[AgentLevel] = mapped_column(
        SQLAlchemyEnum(
            AgentLevel,
            values_callable=lambda x: [e.value for e in x],
            name="agentlevel",
        ),
        default=AgentLevel.L1,
        nullable=False,
    )
    total_sales: Mapped[Decimal] = mapped_column(
        MONEY,
        default=Decimal("0.00"),
        server_default="0",
        nullable=False,
    )
    agent_commission_percentage: Mapped[Decimal] = mapped_column(
        PERCENT,
        nullable=False,
        comment="Agent share of each sale, 0-100",
    )
    organization_commission_percentage: Mapped[Decimal] = mapped_column(
        PERCENT,
        nullable=False,
        comment="Organization share of each sale, 0-100",
    )

    def __repr__(self) -> str:
        return f"<Agent(id={self.id}, email='{self.email}', level={self.level})>"
