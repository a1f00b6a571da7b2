"""Business logic services."""

from src.services.agents import AgentService
from src.services.commission import CommissionSplit, compute_commissions, validate_split
from src.services.exceptions import (
    ConflictError,
    ConsistencyError,
    LedgerError,
    NotFoundError,
    ValidationError,
)
from src.services.ledger import ConsistencyReport, SalesLedgerService, SalesSummary
from src.services.promotion import evaluate_level, remaining_to_promotion, should_promote

__all__ = [
    "AgentService",
    "SalesLedgerService",
    "SalesSummary",
    "ConsistencyReport",
    "CommissionSplit",
    "compute_commissions",
    "validate_split",
    "should_promote",
    "evaluate_level",
    "remaining_to_promotion",
    "LedgerError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "ConsistencyError",
]
