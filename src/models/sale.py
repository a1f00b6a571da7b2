"""
Sale model: one transaction attributed to an agent.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import MONEY, PERCENT, Base, TimestampMixin


class SaleStatus(str, Enum):
    """Operator-set sale status. There are no automatic transitions."""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Sale(Base, TimestampMixin):
    """
    A recorded sale.

    The agent's name and commission split are copied onto the sale when it
    is written, so past commissions keep their values after the agent is
    renamed, re-rated or deleted.

    agent_id deliberately has no foreign key: deleting an agent leaves its
    sales in place.
    """

    __tablename__ = "sales"

    id: Mapped[int] = mapped_column(primary_key=True)
    agent_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
    )
    agent_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Agent name at time of sale",
    )

    customer_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    product_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Property sold",
    )
    description: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    amount: Mapped[Decimal] = mapped_column(
        MONEY,
        nullable=False,
    )
    sale_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    status: Mapped[SaleStatus] = mapped_column(
        SQLAlchemyEnum(
            SaleStatus,
            values_callable=lambda x: [e.value for e in x],
            name="salestatus",
        ),
        default=SaleStatus.PENDING,
        nullable=False,
        index=True,
    )

    # Commission snapshot
    agent_commission_percentage: Mapped[Decimal] = mapped_column(
        PERCENT,
        nullable=False,
    )
    organization_commission_percentage: Mapped[Decimal] = mapped_column(
        PERCENT,
        nullable=False,
    )
    agent_commission_amount: Mapped[Decimal] = mapped_column(
        MONEY,
        nullable=False,
    )
    organization_commission_amount: Mapped[Decimal] = mapped_column(
        MONEY,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Sale(id={self.id}, agent_id={self.agent_id}, amount={self.amount})>"
