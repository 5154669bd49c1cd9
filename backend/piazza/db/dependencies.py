from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings
from ..core.errors import StoreFailure
from .session import get_database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Get an asynchronous database session from the application's store handle.

    Yields:
        AsyncSession: A SQLAlchemy asynchronous database session
    """
    database = get_database(request.app)
    if database is None:
        raise StoreFailure("Database is not initialised")
    async with database.session() as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
