"""Admin API router aggregation."""

from fastapi import APIRouter

from src.api.admin.agents import router as agents_router
from src.api.admin.sales import router as sales_router

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

admin_router.include_router(agents_router)
admin_router.include_router(sales_router)

__all__ = ["admin_router"]
