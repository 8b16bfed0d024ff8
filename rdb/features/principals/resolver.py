"""
Principal resolution.

A principal reference is a tagged pair {type, id}. Resolution dispatches on
the type; anything that cannot be turned into an existing user or group is
reported as a missing `principal_id`.
"""
from typing import Any, Dict, Optional, Tuple, Union
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rdb.core.database.base import is_storable_id
from rdb.core.errors import ValidationFailed, REQUIRED
from rdb.features.principals.avatar import avatar_url
from rdb.features.principals.kinds import PrincipalKind
from rdb.features.users.models import User, Group
from rdb.utils import get_logger


log = get_logger(__name__)

Principal = Union[User, Group]

_MODELS = {
    PrincipalKind.USER: User,
    PrincipalKind.GROUP: Group,
}


def _parse_kind(value: Any) -> Optional[PrincipalKind]:
    if isinstance(value, PrincipalKind):
        return value
    if not isinstance(value, str):
        return None
    try:
        return PrincipalKind(value.strip().lower())
    except ValueError:
        return None


def _parse_id(value: Any) -> Optional[int]:
    # bool is an int subclass but never a valid id; floats are never truncated
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not (value.isascii() and value.isdigit()):
            return None
        value = int(value)
    if not isinstance(value, int):
        return None
    return value if is_storable_id(value) else None


async def find_principal(db: AsyncSession, kind: PrincipalKind, principal_id: int) -> Optional[Principal]:
    """Look up a user (locked ones included) or a group by id, None when it does not exist."""
    model = _MODELS[kind]
    stmt = select(model).where(model.id == principal_id)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def resolve(db: AsyncSession, ref: Any) -> Principal:
    """
    Resolve a {type, id} reference to a User or Group.

    Args:
        db: Database session
        ref: Mapping (or object with `type`/`id` attributes) from the request

    Raises:
        ValidationFailed: `required` on `principal_id` for a missing
            reference, an unsupported type, a malformed id or an unknown
            principal.
    """
    if ref is None:
        raise ValidationFailed("principal_id", REQUIRED)

    if isinstance(ref, dict):
        raw_kind, raw_id = ref.get("type"), ref.get("id")
    else:
        raw_kind, raw_id = getattr(ref, "type", None), getattr(ref, "id", None)

    kind = _parse_kind(raw_kind)
    principal_id = _parse_id(raw_id)
    if kind is None or principal_id is None:
        log.debug("Unresolvable principal reference type=%r id=%r", raw_kind, raw_id)
        raise ValidationFailed("principal_id", REQUIRED)

    principal = await find_principal(db, kind, principal_id)
    if principal is None:
        log.debug("No %s with id %s", kind.value, principal_id)
        raise ValidationFailed("principal_id", REQUIRED)

    return principal


def kind_of(principal: Principal) -> PrincipalKind:
    return PrincipalKind.GROUP if isinstance(principal, Group) else PrincipalKind.USER


def describe(principal: Principal) -> dict:
    """Public description used in permission and search responses."""
    email = principal.email if isinstance(principal, User) else None
    return {
        "type": kind_of(principal).value,
        "name": principal.name,
        "id": principal.id,
        "avatar_url": avatar_url(email),
    }


async def load_principals(db: AsyncSession, refs) -> Dict[Tuple[PrincipalKind, int], Principal]:
    """
    Batch-load principals for a set of (kind, id) references.

    Inactive users are included: they still hold their permissions.
    """
    wanted: Dict[PrincipalKind, set] = {}
    for kind, principal_id in refs:
        wanted.setdefault(PrincipalKind(kind), set()).add(principal_id)

    found: Dict[Tuple[PrincipalKind, int], Principal] = {}
    for kind, ids in wanted.items():
        model = _MODELS[kind]
        result = await db.execute(select(model).where(model.id.in_(ids)))
        for principal in result.scalars().all():
            found[(kind, principal.id)] = principal

    return found
