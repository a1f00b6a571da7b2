"""Persistence layer for agents and sales."""

from src.repositories.agents import AgentRepository
from src.repositories.sales import SaleFilter, SaleRepository

__all__ = [
    "AgentRepository",
    "SaleFilter",
    "SaleRepository",
]
