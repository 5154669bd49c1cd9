"""
CRUD operations for users.
"""
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from piazza.db.models.user import User


async def get_user(db: AsyncSession, user_id: UUID) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower().strip()))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, name: str, email: str, password_hash: str) -> User:
    """
    Create a new user. The email is stored lower-cased.

    Returns:
        User: Created user
    """
    user = User(name=name, email=email.lower().strip(), password_hash=password_hash)
    db.add(user)
    await db.flush()
    return user
