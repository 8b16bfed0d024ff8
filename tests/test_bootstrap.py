from __future__ import annotations

import pytest
from sqlalchemy import select

from rdb.features.dashboards.models import Dashboard
from rdb.features.permissions.bootstrap import ensure_dashboard, grant_admin
from rdb.features.permissions.models import Permission
from rdb.features.permissions.roles import Role

from conftest import DLOPPER_ID, RHILL_ID


async def test_creates_missing_board(db, seed) -> None:
    dashboard = await ensure_dashboard(db, 5, "New Board")
    assert dashboard.id == 5
    assert (await db.execute(select(Dashboard.name).where(Dashboard.id == 5))).scalar_one() == "New Board"


async def test_missing_board_without_name(db, seed) -> None:
    with pytest.raises(LookupError):
        await ensure_dashboard(db, 5)


async def test_board_id_out_of_range(db, seed) -> None:
    with pytest.raises(ValueError):
        await ensure_dashboard(db, 2**63, "Too Big")


async def test_existing_board_is_returned(db, seed) -> None:
    dashboard = await ensure_dashboard(db, seed.board.id, "ignored")
    assert dashboard.name == "My Board"


async def test_grant_admin_to_newcomer(db, seed) -> None:
    permission = await grant_admin(db, seed.other_board, RHILL_ID)
    assert permission.role == Role.ADMIN
    assert permission.dashboard_id == seed.other_board.id


async def test_grant_admin_raises_existing_role(db, seed) -> None:
    permission = await grant_admin(db, seed.board, DLOPPER_ID)
    assert permission.id == seed.permissions[1].id

    stored = (await db.execute(select(Permission.role).where(Permission.id == permission.id))).scalar_one()
    assert stored == Role.ADMIN
