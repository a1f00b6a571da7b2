"""
Service dependencies.

Services share the request's session, so a route's writes and its audit
entry commit together.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.db import get_db
from src.services.agents import AgentService
from src.services.ledger import SalesLedgerService


async def get_agent_service(db: AsyncSession = Depends(get_db)) -> AgentService:
    return AgentService(db)


async def get_ledger_service(db: AsyncSession = Depends(get_db)) -> SalesLedgerService:
    return SalesLedgerService(db)
