"""
Database models.

All models are exported here for convenient imports:
    from src.models import Agent, Sale, AuditLog, etc.
"""

from src.models.agent import Agent, AgentLevel
from src.models.audit import AuditAction, AuditLog
from src.models.base import Base, TimestampMixin
from src.models.sale import Sale, SaleStatus

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Agent
    "Agent",
    "AgentLevel",
    # Sale
    "Sale",
    "SaleStatus",
    # Audit
    "AuditLog",
    "AuditAction",
]
