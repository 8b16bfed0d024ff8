"""
First administrator of a board.

Only board administrators can grant roles, so a new board needs one ADMIN
assigned out of band. This is that path; it bypasses the authorization gate.
"""
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from rdb.core.errors import ValidationFailed, ALREADY_TAKEN
from rdb.core.database.base import is_storable_id
from rdb.features.dashboards.models import Dashboard
from rdb.features.permissions.dependencies import get_dashboard
from rdb.features.permissions.models import Permission
from rdb.features.permissions.roles import Role
from rdb.features.permissions import store
from rdb.features.principals.kinds import PrincipalKind
from rdb.utils import get_logger


log = get_logger(__name__)


async def ensure_dashboard(db: AsyncSession, board_id: int, name: Optional[str] = None) -> Dashboard:
    """Return the board, creating it when `name` is given and it does not exist."""
    if not is_storable_id(board_id):
        raise ValueError(f"Board id {board_id} is out of range")

    dashboard = await get_dashboard(db, board_id)
    if dashboard is not None:
        return dashboard

    if name is None:
        raise LookupError(f"Dashboard {board_id} does not exist")

    dashboard = Dashboard(id=board_id, name=name)
    db.add(dashboard)
    await db.commit()
    log.info("Created dashboard %s (%s)", board_id, name)
    return dashboard


async def grant_admin(db: AsyncSession, dashboard: Dashboard, user_id: int) -> Permission:
    """
    Make `user_id` ADMIN on `dashboard`.

    An existing permission of the user is raised to ADMIN instead.
    """
    ref = {"type": PrincipalKind.USER.value, "id": user_id}
    try:
        return await store.create_permission(db, dashboard, ref, Role.ADMIN, actor=None)
    except ValidationFailed as e:
        if ALREADY_TAKEN not in e.errors.get("principal_id", []):
            raise

    permission = await store.find_existing(db, dashboard.id, PrincipalKind.USER, user_id)
    if permission.role != Role.ADMIN:
        log.info("Raising user %s to ADMIN on dashboard %s", user_id, dashboard.id)
        permission.role = Role.ADMIN
        await db.commit()
    return permission
