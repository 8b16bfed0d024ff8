"""
Board roles.

Roles form a closed, ordered set: READ < EDIT < ADMIN. Input is accepted in
any letter case, storage and output always use the uppercase token.
"""
import enum
from typing import Any

from rdb.core.errors import ValidationFailed, INVALID_ROLE


class Role(str, enum.Enum):
    READ = "READ"
    EDIT = "EDIT"
    ADMIN = "ADMIN"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def includes(self, other: "Role") -> bool:
        """True when this role grants at least what `other` grants."""
        return self.rank >= other.rank

    @property
    def can_view(self) -> bool:
        return self.includes(Role.READ)

    @property
    def can_edit(self) -> bool:
        return self.includes(Role.EDIT)

    @property
    def can_manage_permissions(self) -> bool:
        return self.includes(Role.ADMIN)


_RANKS = {Role.READ: 1, Role.EDIT: 2, Role.ADMIN: 3}


def normalize(value: Any) -> Role:
    """
    Turn user input into a Role.

    Raises:
        ValidationFailed: `invalid_role` on field `role` for anything that is
            not one of the three role names.
    """
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        raise ValidationFailed("role", INVALID_ROLE)
    try:
        return Role(value.strip().upper())
    except ValueError:
        raise ValidationFailed("role", INVALID_ROLE) from None


def highest(roles) -> Role | None:
    """Highest role of an iterable of roles, None when empty."""
    best = None
    for role in roles:
        if best is None or role.rank > best.rank:
            best = role
    return best
