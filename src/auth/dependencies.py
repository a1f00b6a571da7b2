"""
FastAPI dependencies for authentication.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.jwt import ROLE_ADMIN, ROLE_AGENT, get_token_from_cookie, verify_token
from src.db import get_db
from src.models import Agent
from src.repositories import AgentRepository


@dataclass
class Principal:
    """Authenticated caller: the administrator or one agent."""

    role: str
    agent_id: Optional[int] = None
    agent: Optional[Agent] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


async def get_current_principal_optional(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[Principal]:
    """
    Get current caller from JWT cookie if present.

    Returns None if no valid token found (doesn't raise error).
    Agent tokens for deleted agents are treated as absent.
    """
    token = get_token_from_cookie(request)
    if not token:
        return None

    payload = verify_token(token)
    if not payload:
        return None

    if payload["role"] == ROLE_ADMIN:
        return Principal(role=ROLE_ADMIN)

    agent = await AgentRepository(db).find(payload["agent_id"])
    if not agent:
        return None

    return Principal(role=ROLE_AGENT, agent_id=agent.id, agent=agent)


async def get_current_principal(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """
    Get current authenticated caller.

    Raises 401 if not authenticated or the agent no longer exists.
    """
    token = get_token_from_cookie(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    payload = verify_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    if payload["role"] == ROLE_ADMIN:
        return Principal(role=ROLE_ADMIN)

    agent = await AgentRepository(db).find(payload["agent_id"])
    if not agent:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Agent not found",
        )

    return Principal(role=ROLE_AGENT, agent_id=agent.id, agent=agent)


async def require_admin(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """
    Require the administrator.

    Raises 403 for agents.
    """
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal


async def require_agent(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """
    Require a logged-in agent.

    Unlike admin routes, the administrator is not let through here:
    panel routes act on the caller's own agent record.
    """
    if principal.role != ROLE_AGENT:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Agent access required",
        )
    return principal
