"""
Permission store: create, read, update and delete board permission records.

All validation happens before anything is written. Each mutation writes an
audit row and commits, so a request never leaves partial changes behind.
"""
from typing import Any, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rdb.core.database.base import is_storable_id
from rdb.core.errors import (
    NotAuthorized,
    ValidationFailed,
    ALREADY_TAKEN,
    CANNOT_EDIT_OWN_PERMISSION,
    CANNOT_DELETE_OWN_PERMISSION,
)
from rdb.features.dashboards.models import Dashboard
from rdb.features.permissions.dependencies import ensure_not_self
from rdb.features.permissions.models import Permission, AuditLog
from rdb.features.permissions.roles import Role, normalize
from rdb.features.principals.kinds import PrincipalKind
from rdb.features.principals.resolver import Principal, resolve, kind_of
from rdb.features.users.models import User
from rdb.utils import get_logger


log = get_logger(__name__)


# ============================================================================
# Reads
# ============================================================================

async def list_permissions(db: AsyncSession, dashboard: Dashboard) -> List[Permission]:
    """All permissions of a dashboard in insertion order."""
    stmt = (
        select(Permission)
        .where(Permission.dashboard_id == dashboard.id)
        .order_by(Permission.id)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_permission(db: AsyncSession, dashboard: Dashboard, permission_id: int) -> Permission:
    """
    Get one permission of a dashboard.

    Raises:
        NotAuthorized: if there is no such record on this dashboard
    """
    if not is_storable_id(permission_id):
        raise NotAuthorized()

    stmt = select(Permission).where(
        Permission.id == permission_id,
        Permission.dashboard_id == dashboard.id
    )
    result = await db.execute(stmt)
    permission = result.scalar_one_or_none()

    if permission is None:
        raise NotAuthorized()

    return permission


async def find_existing(
    db: AsyncSession,
    dashboard_id: int,
    kind: PrincipalKind,
    principal_id: int
) -> Optional[Permission]:
    stmt = select(Permission).where(
        Permission.dashboard_id == dashboard_id,
        Permission.principal_type == kind,
        Permission.principal_id == principal_id
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


# ============================================================================
# Mutations
# ============================================================================

def record_audit(
    db: AsyncSession,
    actor: Optional[User],
    action: str,
    permission: Permission,
    details: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """Stage an audit entry in the current transaction."""
    audit_log = AuditLog(
        actor_id=actor.id if actor is not None else None,
        action=action,
        dashboard_id=permission.dashboard_id,
        permission_id=permission.id,
        details=details,
    )
    db.add(audit_log)

    log.info(
        "Audit: actor=%s action=%s dashboard=%s permission=%s",
        audit_log.actor_id, action, permission.dashboard_id, permission.id
    )
    return audit_log


async def create_permission(
    db: AsyncSession,
    dashboard: Dashboard,
    principal_ref: Any,
    role: Any,
    actor: Optional[User]
) -> Permission:
    """
    Grant `role` on `dashboard` to the principal referenced by `principal_ref`.

    `actor` is None only when bootstrapping a board from a script.

    Raises:
        ValidationFailed: `required` / `already_taken` on `principal_id`,
            `invalid_role` on `role`
    """
    errors = ValidationFailed()
    principal: Optional[Principal] = None
    new_role: Optional[Role] = None

    try:
        principal = await resolve(db, principal_ref)
    except ValidationFailed as e:
        for code in e.errors.get("principal_id", []):
            errors.add("principal_id", code)

    try:
        new_role = normalize(role)
    except ValidationFailed as e:
        for code in e.errors.get("role", []):
            errors.add("role", code)

    if errors.errors:
        raise errors

    kind = kind_of(principal)
    dashboard_id, principal_id = dashboard.id, principal.id

    if await find_existing(db, dashboard_id, kind, principal_id) is not None:
        raise ValidationFailed("principal_id", ALREADY_TAKEN)

    permission = Permission(
        dashboard_id=dashboard_id,
        principal_type=kind,
        principal_id=principal_id,
        role=new_role,
    )

    try:
        db.add(permission)
        await db.flush()
    except IntegrityError:
        # Lost a race against a concurrent grant for the same principal
        await db.rollback()
        log.info("Concurrent grant for %s:%s on dashboard %s", kind.value, principal_id, dashboard_id)
        raise ValidationFailed("principal_id", ALREADY_TAKEN)

    record_audit(db, actor, "create", permission, {
        "principal_type": kind.value,
        "principal_id": principal_id,
        "role": new_role.value,
    })
    await db.commit()
    await db.refresh(permission)

    return permission


async def update_role(
    db: AsyncSession,
    permission: Permission,
    role: Any,
    actor: User
) -> Permission:
    """
    Change the role of a permission.

    Raises:
        ValidationFailed: `invalid_role` on `role`
        BusinessRuleViolation: `cannot_edit_own_permission`
    """
    new_role = normalize(role)
    ensure_not_self(permission, actor, CANNOT_EDIT_OWN_PERMISSION)

    old_role = Role(permission.role)
    permission.role = new_role

    record_audit(db, actor, "update", permission, {
        "from": old_role.value,
        "to": new_role.value,
    })
    await db.commit()
    await db.refresh(permission)

    return permission


async def delete_permission(db: AsyncSession, permission: Permission, actor: User) -> None:
    """
    Revoke a permission.

    Raises:
        BusinessRuleViolation: `cannot_delete_own_permission`
    """
    ensure_not_self(permission, actor, CANNOT_DELETE_OWN_PERMISSION)

    record_audit(db, actor, "delete", permission, {
        "principal_type": PrincipalKind(permission.principal_type).value,
        "principal_id": permission.principal_id,
        "role": Role(permission.role).value,
    })
    await db.delete(permission)
    await db.commit()
