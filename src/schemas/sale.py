"""Sale schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, Field

from src.models.sale import SaleStatus
from src.schemas.types import JsonDecimal


class SaleCreate(BaseModel):
    """
    Record a sale.

    Commission fields are not accepted: they are derived from the agent's
    current split on the server.
    """

    agent_id: Optional[int] = Field(None, description="Required for admin; ignored on the agent panel")
    customer_name: str = Field(..., min_length=1, max_length=255)
    product_name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=500)
    amount: Decimal = Field(..., ge=0)
    sale_date: Optional[Union[datetime, date]] = None
    notes: Optional[str] = Field(None, max_length=2000)
    status: SaleStatus = SaleStatus.PENDING


class SaleUpdate(BaseModel):
    """Edit a sale (admin only). Commission is re-derived on save."""

    agent_id: Optional[int] = None
    customer_name: Optional[str] = Field(None, min_length=1, max_length=255)
    product_name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=500)
    amount: Optional[Decimal] = Field(None, ge=0)
    sale_date: Optional[Union[datetime, date]] = None
    notes: Optional[str] = Field(None, max_length=2000)
    status: Optional[SaleStatus] = None


class SaleResponse(BaseModel):
    """Sale with its commission snapshot."""

    id: int
    agent_id: int
    agent_name: str
    # Live agent email; None when the agent has been deleted
    agent_email: Optional[str] = None
    customer_name: str
    product_name: str
    description: Optional[str] = None
    notes: Optional[str] = None
    amount: JsonDecimal
    sale_date: datetime
    status: SaleStatus
    agent_commission_percentage: JsonDecimal
    organization_commission_percentage: JsonDecimal
    agent_commission_amount: JsonDecimal
    organization_commission_amount: JsonDecimal
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_sale(cls, sale, agent=None) -> "SaleResponse":
        """
        Build from a Sale row and, optionally, its live agent.

        The stored agent_name is always used so orphaned sales still
        display who made them.
        """
        response = cls.model_validate(sale)
        response.agent_email = agent.email if agent is not None else None
        return response


class SalesSummaryResponse(BaseModel):
    """Aggregated commission split."""

    count: int
    revenue: JsonDecimal
    agent_earnings: JsonDecimal
    organization_earnings: JsonDecimal
    agent_share_percent: float = 0.0
    organization_share_percent: float = 0.0

    @classmethod
    def from_summary(cls, summary) -> "SalesSummaryResponse":
        """Build from a ledger SalesSummary, adding each side's share of revenue."""
        agent_share = org_share = 0.0
        if summary.revenue > 0:
            agent_share = round(float(summary.agent_earnings / summary.revenue * 100), 1)
            org_share = round(float(summary.organization_earnings / summary.revenue * 100), 1)
        return cls(
            count=summary.count,
            revenue=summary.revenue,
            agent_earnings=summary.agent_earnings,
            organization_earnings=summary.organization_earnings,
            agent_share_percent=agent_share,
            organization_share_percent=org_share,
        )
