"""Pydantic schemas for request/response validation."""

from src.schemas.agent import (
    AgentCreate,
    AgentProfileResponse,
    AgentResponse,
    AgentUpdate,
    ConsistencyResponse,
    PasswordChange,
)
from src.schemas.auth import AdminLoginRequest, LoginRequest, LoginResponse
from src.schemas.sale import SaleCreate, SaleResponse, SalesSummaryResponse, SaleUpdate

__all__ = [
    # Auth
    "LoginRequest",
    "AdminLoginRequest",
    "LoginResponse",
    # Agent
    "AgentCreate",
    "AgentUpdate",
    "AgentResponse",
    "AgentProfileResponse",
    "ConsistencyResponse",
    "PasswordChange",
    # Sale
    "SaleCreate",
    "SaleUpdate",
    "SaleResponse",
    "SalesSummaryResponse",
]
