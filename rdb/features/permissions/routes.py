"""
Board permission API routes.

Mounted under /rdb/boards/{board_id}/permissions. Every route requires the
ADMIN role on the board; anything else is answered with an empty 404.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from rdb.core import config
from rdb.core.database.engine import get_db
from rdb.core.rate_limit import limiter
from rdb.features.permissions.dependencies import (
    BoardContext,
    PermissionAction,
    require_board_admin,
)
from rdb.features.permissions.models import Permission
from rdb.features.permissions.schemas import (
    PermissionCreate,
    PermissionUpdate,
    PermissionResponse,
    PrincipalResponse,
)
from rdb.features.permissions.search import search_principals, DEFAULT_LIMIT, MAX_LIMIT
from rdb.features.permissions import store
from rdb.features.principals.resolver import describe, load_principals
from rdb.utils import get_logger


log = get_logger(__name__)
router = APIRouter()


async def _render(db: AsyncSession, permissions: List[Permission]) -> List[PermissionResponse]:
    principals = await load_principals(db, [p.principal_ref for p in permissions])
    rendered = []
    for permission in permissions:
        principal = principals.get(permission.principal_ref)
        rendered.append(
            PermissionResponse.build(permission, describe(principal) if principal is not None else None)
        )
    return rendered


@router.get("", response_model=List[PermissionResponse])
async def list_permissions(
    db: AsyncSession = Depends(get_db),
    board: BoardContext = Depends(require_board_admin(PermissionAction.INDEX))
):
    """List all permissions of the board."""
    permissions = await store.list_permissions(db, board.dashboard)
    return await _render(db, permissions)


@router.get("/search", response_model=List[PrincipalResponse])
@limiter.limit(config.SEARCH_RATE_LIMIT)
async def search_candidates(
    request: Request,
    q: Optional[str] = None,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    db: AsyncSession = Depends(get_db),
    board: BoardContext = Depends(require_board_admin(PermissionAction.SEARCH))
):
    """Users and groups that could be granted a role on the board."""
    candidates = await search_principals(db, board.dashboard, q, limit)
    return [describe(candidate) for candidate in candidates]


@router.get("/{permission_id}", response_model=PermissionResponse)
async def get_permission(
    permission_id: int,
    db: AsyncSession = Depends(get_db),
    board: BoardContext = Depends(require_board_admin(PermissionAction.SHOW))
):
    """Get a specific permission by ID."""
    permission = await store.get_permission(db, board.dashboard, permission_id)
    return (await _render(db, [permission]))[0]


@router.post("", response_model=PermissionResponse, status_code=status.HTTP_200_OK)
async def create_permission(
    payload: Optional[PermissionCreate] = None,
    db: AsyncSession = Depends(get_db),
    board: BoardContext = Depends(require_board_admin(PermissionAction.CREATE))
):
    """Grant a role on the board to a user or group."""
    payload = payload or PermissionCreate()
    permission = await store.create_permission(
        db, board.dashboard, payload.principal, payload.role, board.actor
    )
    return (await _render(db, [permission]))[0]


@router.patch("/{permission_id}", response_model=PermissionResponse)
async def update_permission(
    permission_id: int,
    payload: Optional[PermissionUpdate] = None,
    db: AsyncSession = Depends(get_db),
    board: BoardContext = Depends(require_board_admin(PermissionAction.UPDATE))
):
    """Change the role of a permission. Administrators cannot change their own."""
    payload = payload or PermissionUpdate()
    permission = await store.get_permission(db, board.dashboard, permission_id)
    permission = await store.update_role(db, permission, payload.role, board.actor)
    return (await _render(db, [permission]))[0]


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_permission(
    permission_id: int,
    db: AsyncSession = Depends(get_db),
    board: BoardContext = Depends(require_board_admin(PermissionAction.DESTROY))
):
    """Revoke a permission. Administrators cannot revoke their own."""
    permission = await store.get_permission(db, board.dashboard, permission_id)
    await store.delete_permission(db, permission, board.actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
