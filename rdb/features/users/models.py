"""
Host user and group directory.

These tables belong to the host application. The permission service reads
them to resolve principals and to expand group membership.
"""
from sqlalchemy import String, Boolean, ForeignKey, Table, Column, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rdb.core.database.base import Base, TimestampMixin


group_users = Table(
    "group_users",
    Base.metadata,
    Column("group_id", Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base, TimestampMixin):
    """
    User account as known to the host.

    `is_admin` is the host-wide administrator flag; it grants nothing on a
    board by itself.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    login: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    groups: Mapped[list["Group"]] = relationship(
        "Group",
        secondary=group_users,
        back_populates="users",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, login={self.login!r})>"


class Group(Base, TimestampMixin):
    """Named collection of users that can hold a board role as a whole."""
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    users: Mapped[list["User"]] = relationship(
        "User",
        secondary=group_users,
        back_populates="groups",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, name={self.name!r})>"
