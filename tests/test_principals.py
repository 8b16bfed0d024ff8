from __future__ import annotations

import pytest

from rdb.core import config
from rdb.core.errors import ValidationFailed
from rdb.features.principals.avatar import avatar_url
from rdb.features.principals.kinds import PrincipalKind
from rdb.features.principals.resolver import describe, load_principals, resolve
from rdb.features.users.models import Group, User

from conftest import DLOPPER2_ID, JSMITH_ID, LOCKED_ID


class TestResolve:
    async def test_user(self, db, seed) -> None:
        principal = await resolve(db, {"type": "user", "id": DLOPPER2_ID})
        assert isinstance(principal, User)
        assert principal.name == "Dave2 Lopper2"

    async def test_string_id_and_object_reference(self, db, seed) -> None:
        class Ref:
            type = "USER"
            id = str(JSMITH_ID)

        principal = await resolve(db, Ref())
        assert principal.id == JSMITH_ID

    async def test_group(self, db, team) -> None:
        principal = await resolve(db, {"type": "group", "id": team.id})
        assert isinstance(principal, Group)
        assert principal.name == "A Team"

    @pytest.mark.parametrize(
        "ref",
        [
            None,
            {},
            {"type": "project", "id": "57664"},
            {"type": "user"},
            {"type": "user", "id": "abc"},
            {"type": "user", "id": True},
            {"type": "user", "id": 1.9},
            {"type": "user", "id": 2.0},
            {"type": "user", "id": "1.9"},
            {"type": "user", "id": "-2"},
            {"type": "user", "id": 0},
            {"type": "user", "id": 2**70},
            {"type": "user", "id": str(2**70)},
            {"type": "user", "id": 99999},
            {"type": "group", "id": 1},
            {"type": ["user"], "id": 1},
        ],
    )
    async def test_unresolvable_reference_is_required(self, db, seed, ref) -> None:
        with pytest.raises(ValidationFailed) as info:
            await resolve(db, ref)
        assert info.value.errors == {"principal_id": ["required"]}

    async def test_locked_user_resolves(self, db, seed) -> None:
        principal = await resolve(db, {"type": "user", "id": LOCKED_ID})
        assert principal.id == LOCKED_ID
        assert principal.is_active is False


async def test_load_principals_includes_locked_users(db, seed, team) -> None:
    found = await load_principals(
        db,
        [(PrincipalKind.USER, JSMITH_ID), (PrincipalKind.USER, LOCKED_ID), (PrincipalKind.GROUP, team.id)],
    )
    assert set(found) == {
        (PrincipalKind.USER, JSMITH_ID),
        (PrincipalKind.USER, LOCKED_ID),
        (PrincipalKind.GROUP, team.id),
    }


class TestAvatar:
    def test_disabled(self, monkeypatch) -> None:
        monkeypatch.setattr(config, "GRAVATAR_ENABLED", False)
        assert avatar_url("jsmith@somenet.foo") is None

    def test_enabled(self, monkeypatch) -> None:
        monkeypatch.setattr(config, "GRAVATAR_ENABLED", True)
        monkeypatch.setattr(config, "GRAVATAR_DEFAULT", "")
        assert avatar_url(" JSmith@somenet.foo ") == (
            "https://secure.gravatar.com/avatar/8238a5d4cfa7147f05f31b63a8a320ce?rating=PG&size=128&default="
        )

    def test_no_email(self, monkeypatch) -> None:
        monkeypatch.setattr(config, "GRAVATAR_ENABLED", True)
        assert avatar_url(None) is None


async def test_describe(db, seed, team, monkeypatch) -> None:
    monkeypatch.setattr(config, "GRAVATAR_ENABLED", False)
    user = await db.get(User, JSMITH_ID)
    assert describe(user) == {"type": "user", "name": "John Smith", "id": JSMITH_ID, "avatar_url": None}
    assert describe(team) == {"type": "group", "name": "A Team", "id": team.id, "avatar_url": None}
