"""
Database session management module.

The store is an explicit handle: ``main.py`` builds one ``Database`` per
application in its lifespan and keeps it on ``app.state.db``.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..core.config import Settings
from ..core.errors import StoreFailure
from .models import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the async engine and session factory for one application."""

    def __init__(self, url: str, echo: bool = False):
        engine_kwargs = {"echo": echo, "pool_pre_ping": True}
        if not url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=10,
                max_overflow=20,
                pool_timeout=30,
                pool_recycle=1800,
            )
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.DATABASE_URL, echo=settings.DB_ECHO)

    async def connect(self, create_tables: bool = False) -> None:
        """
        Verify connectivity, optionally creating the schema.

        Raises:
            StoreFailure: If the database cannot be reached
        """
        try:
            async with self.engine.begin() as conn:
                if create_tables:
                    await conn.run_sync(Base.metadata.create_all)
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"[DB] Connection error: {e}")
            raise StoreFailure("Database connection failed") from e
        logger.info("[DB] Connected")

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session, rolling back if the request handler raised.
        Writes commit explicitly through ``commit``.
        """
        async with self.sessionmaker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise


async def commit(db: AsyncSession) -> None:
    """
    Commit the current transaction.

    Raises:
        StoreFailure: If the commit fails; the transaction is rolled back
    """
    try:
        await db.commit()
    except SQLAlchemyError as e:
        logger.exception(f"[DB] Commit failed: {e}")
        await db.rollback()
        raise StoreFailure() from e


def get_database(app) -> Optional[Database]:
    return getattr(app.state, "db", None)
