"""
Base module for SQLAlchemy models.
"""
import uuid

from sqlalchemy import MetaData, Column, DateTime, Uuid
from sqlalchemy.orm import declarative_base, declared_attr

from ..posts.lifecycle import utcnow

# Define naming convention for constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

# Create metadata with naming convention
db_metadata = MetaData(naming_convention=convention)

# Create base model class
Base = declarative_base(metadata=db_metadata)


class TimestampMixin:
    # Stamped from the application clock so expiry and ordering share one time source
    @declared_attr
    def created_at(cls):
        return Column(DateTime, default=utcnow, nullable=False, index=True)

    @declared_attr
    def updated_at(cls):
        return Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class UUIDMixin:
    @declared_attr
    def id(cls):
        return Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
