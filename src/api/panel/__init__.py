"""Agent panel API router aggregation."""

from fastapi import APIRouter

from src.api.panel.profile import router as profile_router
from src.api.panel.sales import router as sales_router

panel_router = APIRouter(prefix="/panel", tags=["Panel"])

panel_router.include_router(profile_router)
panel_router.include_router(sales_router)

__all__ = ["panel_router"]
