"""
Async SQLAlchemy database session configuration.

The engine is owned by a Database handle built once at startup and kept on
app.state; request handlers get sessions through the get_db dependency.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

logger = logging.getLogger(__name__)


class Database:
    """Connection handle: one engine plus its session factory."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "Database":
        """
        Create a handle for the given URL.

        NullPool is used for PostgreSQL (serverless poolers); SQLite keeps
        the dialect default so in-memory databases stay on one connection.
        """
        kwargs = {"echo": echo}
        if url.startswith("postgresql"):
            kwargs["poolclass"] = NullPool
            kwargs["connect_args"] = {"statement_cache_size": 0}
        return cls(create_async_engine(url, **kwargs))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Unit-of-work session: commits on success, rolls back on error.
        Use in non-FastAPI contexts (scripts, startup, etc).
        Usage:
            async with database.session() as db:
                result = await db.execute(...)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions.

    The whole request runs in one transaction, so a ledger operation either
    commits all of its writes or none of them.
    Usage:
        @app.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database is not initialised; was the app lifespan run?")

    async with database.session() as session:
        yield session
