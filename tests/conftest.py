"""Shared fixtures: a throwaway SQLite database, host users and a board.

The host fixture data mirrors a small issue tracker: seven users (one of
them locked) and a board where John Smith is ADMIN and Dave Lopper has EDIT.
"""

from __future__ import annotations

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="rdb-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["SESSION_SECRET"] = "test-secret-for-rdb"  # noqa: S105
os.environ["SEARCH_RATE_LIMIT"] = "1000/minute"

from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from rdb.core.database.base import Base  # noqa: E402
from rdb.core.database.engine import AsyncSessionLocal, engine, init_db  # noqa: E402
from rdb.features.dashboards.models import Dashboard  # noqa: E402
from rdb.features.permissions.models import Permission  # noqa: E402
from rdb.features.permissions.roles import Role  # noqa: E402
from rdb.features.principals.kinds import PrincipalKind  # noqa: E402
from rdb.features.users.auth import encode_token  # noqa: E402
from rdb.features.users.models import Group, User  # noqa: E402

ADMIN_ID = 1
JSMITH_ID = 2
DLOPPER_ID = 3
RHILL_ID = 4
DLOPPER2_ID = 5
ANONYMOUS_ID = 6
SOMEONE_ID = 7
LOCKED_ID = DLOPPER2_ID

_USERS = [
    dict(id=ADMIN_ID, login="admin", name="Redmine Admin", email="admin@somenet.foo", is_admin=True),
    dict(id=JSMITH_ID, login="jsmith", name="John Smith", email="jsmith@somenet.foo"),
    dict(id=DLOPPER_ID, login="dlopper", name="Dave Lopper", email="dlopper@somenet.foo"),
    dict(id=RHILL_ID, login="rhill", name="Robert Hill", email="rhill@somenet.foo"),
    dict(id=DLOPPER2_ID, login="dlopper2", name="Dave2 Lopper2", email="dlopper2@somenet.foo", is_active=False),
    dict(id=ANONYMOUS_ID, login="anonymous", name="Anonymous", email=None),
    dict(id=SOMEONE_ID, login="someone", name="Some One", email="someone@foo.bar"),
]


@pytest.fixture(autouse=True)
async def database():
    """Fresh schema for every test."""
    await init_db()
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def seed(db):
    """Host users, one board and its two initial permissions."""
    db.add_all(User(**attrs, groups=[]) for attrs in _USERS)
    board = Dashboard(id=1, name="My Board")
    other_board = Dashboard(id=2, name="Other Board")
    db.add_all([board, other_board])
    await db.flush()

    admin_permission = Permission(
        dashboard_id=board.id, principal_type=PrincipalKind.USER, principal_id=JSMITH_ID, role=Role.ADMIN
    )
    edit_permission = Permission(
        dashboard_id=board.id, principal_type=PrincipalKind.USER, principal_id=DLOPPER_ID, role=Role.EDIT
    )
    db.add(admin_permission)
    await db.flush()
    db.add(edit_permission)
    await db.commit()

    return SimpleNamespace(
        board=board,
        other_board=other_board,
        permissions=[admin_permission, edit_permission],
    )


@pytest.fixture
async def team(db, seed):
    """A group containing Robert Hill and Some One."""
    members = [await db.get(User, RHILL_ID), await db.get(User, SOMEONE_ID)]
    group = Group(id=10, name="A Team")
    group.users = members
    db.add(group)
    await db.commit()
    return group


@pytest.fixture
async def client():
    from rdb.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def auth(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {encode_token(user_id)}"}


def board_url(board_id: int = 1, suffix: str = "") -> str:
    return f"/rdb/boards/{board_id}/permissions{suffix}"
