"""
SQLAlchemy declarative base and common model utilities.

Every table of the service and the host tables it reads inherit from Base.
"""
from datetime import datetime
from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from ulid import ULID


# Largest value an INTEGER primary key can hold
MAX_ID = 2**63 - 1


def generate_ulid() -> str:
    """Generate a new ULID string."""
    return str(ULID())


def is_storable_id(value: int) -> bool:
    return 1 <= value <= MAX_ID


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Usage:
        from rdb.core.database.base import Base

        class Dashboard(Base):
            __tablename__ = "dashboards"

            id: Mapped[int] = mapped_column(primary_key=True)
            name: Mapped[str] = mapped_column(String(255))
    """
    pass


class TimestampMixin:
    """
    Mixin to add created_at and updated_at timestamps to models.
    """
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
