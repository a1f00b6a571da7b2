"""Agent schemas. Password hashes are never part of a response."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from src.models.agent import AgentLevel
from src.schemas.types import JsonDecimal


class AgentCreate(BaseModel):
    """Create a new agent account (admin only)."""

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=100)
    level: AgentLevel = AgentLevel.L1
    total_sales: Decimal = Field(Decimal("0"), ge=0)
    agent_commission_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    organization_commission_percentage: Optional[Decimal] = Field(None, ge=0, le=100)


class AgentUpdate(BaseModel):
    """
    Partial agent update.

    When changing the split, send both percentages; a lone percentage is
    accepted only if it complements the stored one.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    password: Optional[str] = Field(None, min_length=6, max_length=100)
    level: Optional[AgentLevel] = None
    agent_commission_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    organization_commission_percentage: Optional[Decimal] = Field(None, ge=0, le=100)

    @model_validator(mode="after")
    def check_split(self) -> "AgentUpdate":
        agent_pct = self.agent_commission_percentage
        org_pct = self.organization_commission_percentage
        if agent_pct is not None and org_pct is not None and agent_pct + org_pct != 100:
            raise ValueError("Commission percentages must sum to 100")
        return self


class AgentResponse(BaseModel):
    """Agent information for admin and panel views."""

    id: int
    name: str
    email: str
    level: AgentLevel
    total_sales: JsonDecimal
    agent_commission_percentage: JsonDecimal
    organization_commission_percentage: JsonDecimal
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AgentProfileResponse(AgentResponse):
    """Agent dashboard: own record plus progress toward the next tier."""

    promotion_threshold: JsonDecimal
    remaining_to_promotion: JsonDecimal


class ConsistencyResponse(BaseModel):
    """Agent running total compared with the ledger."""

    agent_id: int
    recorded_total: JsonDecimal
    ledger_total: JsonDecimal
    drift: JsonDecimal
    consistent: bool


class PasswordChange(BaseModel):
    """Password change request."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=100)
