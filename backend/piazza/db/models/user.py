"""
User model for authentication.
"""
from sqlalchemy import Column, String

from ..base import Base, UUIDMixin, TimestampMixin


class User(Base, UUIDMixin, TimestampMixin):
    """
    A registered board member. Posts only consume ``id`` and ``name``.
    """
    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
