"""
Realty commission tracker

Main FastAPI application with:
- Agent management for the administrator
- Sales ledger with commission splits and tier promotion
- Agent panel for recording and reviewing own sales
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.api import admin_router, api_router, panel_router
from src.config import settings
from src.db import Database
from src.services.exceptions import LedgerError

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Opens the database handle shared by all requests

    Shutdown:
    - Disposes of the engine
    """
    logger.info("Starting realty commission tracker...")

    database = Database.from_url(settings.database_url, echo=not settings.is_production)
    app.state.database = database

    logger.info("Started successfully!")

    yield

    logger.info("Shutting down...")
    await database.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Realty Commission Tracker",
        description="Agent sales ledger with commission splits",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        """Domain errors become 404/409/422/500 with a readable message."""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
        )

    app.include_router(api_router)  # /api/* endpoints
    app.include_router(admin_router)  # /admin/* endpoints
    app.include_router(panel_router)  # /panel/* endpoints

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
    )
