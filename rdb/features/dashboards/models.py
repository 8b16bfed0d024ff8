"""
Dashboard (board) model.
"""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rdb.core.database.base import Base, TimestampMixin


class Dashboard(Base, TimestampMixin):
    """
    Board owning a set of permission records.

    Deleting a board deletes its permissions.
    """
    __tablename__ = "dashboards"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    permissions: Mapped[list["Permission"]] = relationship(  # type: ignore
        "Permission",
        back_populates="dashboard",
        cascade="all",
        passive_deletes=True,
        order_by="Permission.id",
        lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<Dashboard(id={self.id}, name={self.name!r})>"
