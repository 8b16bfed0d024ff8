"""
Candidate principals for the "add permission" dialog.
"""
from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rdb.features.dashboards.models import Dashboard
from rdb.features.permissions.models import Permission
from rdb.features.principals.kinds import PrincipalKind
from rdb.features.principals.resolver import Principal
from rdb.features.users.models import User, Group


DEFAULT_LIMIT = 50
MAX_LIMIT = 200


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _taken_ids(dashboard_id: int, kind: PrincipalKind):
    return select(Permission.principal_id).where(
        Permission.dashboard_id == dashboard_id,
        Permission.principal_type == kind
    )


async def search_principals(
    db: AsyncSession,
    dashboard: Dashboard,
    query: str | None = None,
    limit: int = DEFAULT_LIMIT
) -> List[Principal]:
    """
    Users (locked ones included) and groups that do not yet hold a
    permission on `dashboard`.

    A non-empty `query` keeps principals whose name contains it, ignoring
    case. Users come first, then groups, each ordered by name.
    """
    limit = max(1, min(limit, MAX_LIMIT))
    query = (query or "").strip()

    user_stmt = select(User).where(
        User.id.not_in(_taken_ids(dashboard.id, PrincipalKind.USER))
    )
    group_stmt = select(Group).where(
        Group.id.not_in(_taken_ids(dashboard.id, PrincipalKind.GROUP))
    )

    if query:
        pattern = _like_pattern(query)
        user_stmt = user_stmt.where(User.name.ilike(pattern, escape="\\"))
        group_stmt = group_stmt.where(Group.name.ilike(pattern, escape="\\"))

    result = await db.execute(user_stmt.order_by(User.name, User.id).limit(limit))
    candidates: List[Principal] = list(result.scalars().all())

    remaining = limit - len(candidates)
    if remaining > 0:
        result = await db.execute(group_stmt.order_by(Group.name, Group.id).limit(remaining))
        candidates.extend(result.scalars().all())

    return candidates
