from __future__ import annotations

import pytest

from rdb.core.errors import ValidationFailed
from rdb.features.permissions.roles import Role, highest, normalize


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("READ", Role.READ),
        ("read", Role.READ),
        ("Edit", Role.EDIT),
        ("admin", Role.ADMIN),
        ("  ADMIN ", Role.ADMIN),
        (Role.EDIT, Role.EDIT),
    ],
)
def test_normalize_accepts_known_roles(value, expected) -> None:
    assert normalize(value) is expected


@pytest.mark.parametrize("value", ["MASTER_OF_DESASTER", "", "owner", "READER", None, 3, ["READ"]])
def test_normalize_rejects_everything_else(value) -> None:
    with pytest.raises(ValidationFailed) as info:
        normalize(value)
    assert info.value.errors == {"role": ["invalid_role"]}


def test_roles_are_ordered() -> None:
    assert Role.READ.rank < Role.EDIT.rank < Role.ADMIN.rank
    assert Role.ADMIN.includes(Role.EDIT)
    assert Role.EDIT.includes(Role.EDIT)
    assert not Role.READ.includes(Role.EDIT)


def test_capabilities_follow_rank() -> None:
    assert Role.READ.can_view and not Role.READ.can_edit
    assert Role.EDIT.can_edit and not Role.EDIT.can_manage_permissions
    assert Role.ADMIN.can_manage_permissions


def test_highest() -> None:
    assert highest([Role.READ, Role.ADMIN, Role.EDIT]) is Role.ADMIN
    assert highest([]) is None
