"""
Board permission and audit models.

A Permission assigns one Role to one principal (user or group) on one
dashboard. The (dashboard, principal) pair is unique at the storage level so
concurrent grants cannot produce duplicates.
"""
from typing import Any, Dict
from sqlalchemy import String, ForeignKey, JSON, Enum, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rdb.core.database.base import Base, TimestampMixin, generate_ulid
from rdb.features.permissions.roles import Role
from rdb.features.principals.kinds import PrincipalKind


class Permission(Base, TimestampMixin):
    """
    Role held by a principal on a dashboard.

    `dashboard_id`, `principal_type` and `principal_id` never change after
    creation; only `role` is updated.
    """
    __tablename__ = "rdb_permissions"
    __table_args__ = (
        UniqueConstraint(
            "dashboard_id", "principal_type", "principal_id",
            name="uq_rdb_permissions_dashboard_principal"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    dashboard_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("dashboards.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Polymorphic principal reference: (kind, id) into users or groups
    principal_type: Mapped[PrincipalKind] = mapped_column(
        Enum(PrincipalKind, native_enum=False, length=16, values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )
    principal_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, length=16, validate_strings=True),
        nullable=False
    )

    dashboard: Mapped["Dashboard"] = relationship(  # type: ignore
        "Dashboard",
        back_populates="permissions",
        lazy="raise"
    )

    @property
    def principal_ref(self) -> tuple[PrincipalKind, int]:
        return PrincipalKind(self.principal_type), self.principal_id

    def __repr__(self) -> str:
        return (
            f"<Permission(id={self.id}, dashboard_id={self.dashboard_id}, "
            f"principal={self.principal_type}:{self.principal_id}, role={self.role})>"
        )


class AuditLog(Base, TimestampMixin):
    """
    Audit trail of permission changes.

    Tracks who granted, changed or revoked which board permission.
    """
    __tablename__ = "rdb_audit_logs"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)

    actor_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    action: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    dashboard_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    permission_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    details: Mapped[Dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<AuditLog(id={self.id}, actor_id={self.actor_id}, action={self.action})>"
