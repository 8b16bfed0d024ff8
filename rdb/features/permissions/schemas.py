"""
Pydantic schemas for board permission management.

Request models are deliberately loose: shape problems in `principal` or
`role` are reported by the store as domain error codes, not as generic
request validation errors.
"""
from typing import Any, Optional
from pydantic import BaseModel, Field

from rdb.features.permissions.models import Permission
from rdb.features.permissions.roles import Role
from rdb.features.principals.kinds import PrincipalKind


# ============================================================================
# Requests
# ============================================================================

class PermissionCreate(BaseModel):
    """Schema for granting a role to a principal."""
    principal: Optional[Any] = Field(None, description="Principal reference: {\"type\": \"user\"|\"group\", \"id\": int}")
    role: Optional[Any] = Field(None, description="READ, EDIT or ADMIN (any letter case)")


class PermissionUpdate(BaseModel):
    """Schema for changing the role of a permission."""
    role: Optional[Any] = Field(None, description="READ, EDIT or ADMIN (any letter case)")


# ============================================================================
# Responses
# ============================================================================

class PrincipalResponse(BaseModel):
    """Principal as shown in permission responses and search results."""
    type: PrincipalKind
    name: Optional[str] = None
    id: int
    avatar_url: Optional[str] = None


class PermissionResponse(BaseModel):
    """Schema for permission response."""
    id: int
    role: Role
    principal: PrincipalResponse

    @classmethod
    def build(cls, permission: Permission, principal: Optional[dict]) -> "PermissionResponse":
        """
        Combine a permission with its described principal.

        A principal removed from the host directory keeps its reference but
        loses name and avatar.
        """
        if principal is None:
            principal = {
                "type": permission.principal_type,
                "id": permission.principal_id,
            }
        return cls(id=permission.id, role=permission.role, principal=PrincipalResponse(**principal))
