"""
Authorization gate for board permission management.

Implements:
- Effective role lookup (direct user role and roles of the user's groups)
- The per-action authorization decision
- The self-modification guard
- FastAPI dependencies for route protection
"""
import enum
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends
from sqlalchemy import select, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession

from rdb.core.database.base import is_storable_id
from rdb.core.database.engine import get_db
from rdb.core.errors import NotAuthorized, BusinessRuleViolation
from rdb.features.dashboards.models import Dashboard
from rdb.features.permissions.models import Permission
from rdb.features.permissions.roles import Role, highest
from rdb.features.principals.kinds import PrincipalKind
from rdb.features.users.dependencies import get_current_actor
from rdb.features.users.models import User
from rdb.utils import get_logger


log = get_logger(__name__)


class PermissionAction(str, enum.Enum):
    INDEX = "index"
    SHOW = "show"
    SEARCH = "search"
    CREATE = "create"
    UPDATE = "update"
    DESTROY = "destroy"


# Every management action currently needs the top role
REQUIRED_ROLES = {action: Role.ADMIN for action in PermissionAction}


# ============================================================================
# Role Lookup
# ============================================================================

async def effective_role(db: AsyncSession, user: User, dashboard_id: int) -> Optional[Role]:
    """
    Highest role a user holds on a dashboard.

    Considers:
    1. The permission held by the user directly
    2. Permissions held by any group the user belongs to

    Returns:
        The highest Role, or None when the user holds nothing on the board
    """
    principal_filters = [
        and_(
            Permission.principal_type == PrincipalKind.USER,
            Permission.principal_id == user.id
        )
    ]

    group_ids = [group.id for group in user.groups]
    if group_ids:
        principal_filters.append(
            and_(
                Permission.principal_type == PrincipalKind.GROUP,
                Permission.principal_id.in_(group_ids)
            )
        )

    stmt = select(Permission.role).where(
        Permission.dashboard_id == dashboard_id,
        or_(*principal_filters)
    )
    result = await db.execute(stmt)
    return highest(Role(role) for role in result.scalars().all())


# ============================================================================
# Authorization Decision
# ============================================================================

async def authorize(
    db: AsyncSession,
    actor: Optional[User],
    dashboard: Optional[Dashboard],
    action: PermissionAction
) -> Role:
    """
    Decide whether `actor` may perform `action` on the permissions of `dashboard`.

    Anonymous actors, missing dashboards and insufficient roles are all
    reported the same way.

    Returns:
        The actor's effective role on the dashboard

    Raises:
        NotAuthorized: if the action is not allowed
    """
    if actor is None:
        log.debug("Anonymous request denied %s", action.value)
        raise NotAuthorized()

    if dashboard is None:
        log.debug("User %s denied %s on missing dashboard", actor.id, action.value)
        raise NotAuthorized()

    role = await effective_role(db, actor, dashboard.id)
    required = REQUIRED_ROLES[action]

    if role is None or not role.includes(required):
        log.info(
            "User %s denied %s on dashboard %s (role=%s)",
            actor.id, action.value, dashboard.id, role.value if role else None
        )
        raise NotAuthorized()

    log.debug("User %s granted %s on dashboard %s", actor.id, action.value, dashboard.id)
    return role


def is_own_permission(permission: Permission, actor: User) -> bool:
    """True when the permission record is held by the actor directly."""
    return (
        permission.principal_type == PrincipalKind.USER
        and permission.principal_id == actor.id
    )


def ensure_not_self(permission: Permission, actor: User, code: str) -> None:
    """
    Refuse changes to the actor's own record.

    Raises:
        BusinessRuleViolation: with `code` when the record belongs to the actor
    """
    if is_own_permission(permission, actor):
        log.info("User %s tried to change own permission %s", actor.id, permission.id)
        raise BusinessRuleViolation(code)


# ============================================================================
# FastAPI Dependencies
# ============================================================================

@dataclass
class BoardContext:
    """Authorized request scope handed to the permission routes."""
    dashboard: Dashboard
    actor: User
    role: Role


async def get_dashboard(db: AsyncSession, board_id: int) -> Optional[Dashboard]:
    if not is_storable_id(board_id):
        return None
    result = await db.execute(select(Dashboard).where(Dashboard.id == board_id))
    return result.scalar_one_or_none()


def require_board_admin(action: PermissionAction):
    """
    FastAPI dependency to require the right to perform `action`.

    Usage:
        @router.get("/")
        async def list_permissions(
            board: BoardContext = Depends(require_board_admin(PermissionAction.INDEX))
        ):
            ...

    Raises:
        NotAuthorized: rendered as an empty 404
    """
    async def board_dependency(
        board_id: int,
        db: AsyncSession = Depends(get_db),
        actor: Optional[User] = Depends(get_current_actor)
    ) -> BoardContext:
        dashboard = await get_dashboard(db, board_id) if actor is not None else None
        role = await authorize(db, actor, dashboard, action)
        return BoardContext(dashboard=dashboard, actor=actor, role=role)

    return board_dependency
