"""
Request and response models for the RBAC administration API.
"""

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..features.permissions.entities import EffectivePermissions, Permission, Role

T = TypeVar('T')


class BaseSchema(BaseModel):
    """Base schema for all API models."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class APIResponse(BaseSchema, Generic[T]):
    """Standard API response wrapper."""
    success: bool = Field(description="Operation success flag")
    data: Optional[T] = Field(None, description="Response data")
    message: Optional[str] = Field(None, description="Response message")
    errors: Optional[List[Dict[str, Any]]] = Field(None, description="Error details")

    @classmethod
    def success_response(cls, data: Optional[T] = None, message: Optional[str] = None) -> "APIResponse[T]":
        """Create a success response."""
        return cls(success=True, data=data, message=message)

    @classmethod
    def error_response(cls, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> "APIResponse[T]":
        """Create an error response."""
        return cls(success=False, message=message, errors=errors)


# Permissions

class PermissionResponse(BaseSchema):
    """Catalog permission."""
    id: Optional[UUID] = None
    code: str
    module: str
    action: str
    description: Optional[str] = None

    @classmethod
    def from_entity(cls, permission: Permission) -> "PermissionResponse":
        return cls(
            id=permission.id,
            code=permission.code.value,
            module=permission.module,
            action=permission.action,
            description=permission.description,
        )


class PermissionCatalogResponse(BaseSchema):
    """Full catalog, flat and grouped by module."""
    permissions: List[PermissionResponse] = Field(default_factory=list)
    grouped: Dict[str, List[PermissionResponse]] = Field(default_factory=dict)


class CatalogSyncRequest(BaseSchema):
    """Optional tenant whose Admin role is brought up to the full catalog."""
    tenant_id: Optional[UUID] = None


class CatalogSyncResponse(BaseSchema):
    inserted: int
    total: int
    admin_role_updated: bool


class EffectivePermissionsResponse(BaseSchema):
    """Permission map of the calling actor."""
    actor_id: UUID
    is_admin: bool
    permissions: Dict[str, bool] = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, effective: EffectivePermissions) -> "EffectivePermissionsResponse":
        return cls(
            actor_id=effective.actor_id.value,
            is_admin=effective.is_admin,
            permissions=effective.as_map(),
        )


# Roles

class RoleResponse(BaseSchema):
    """Role with its flattened permission codes."""
    id: UUID
    tenant_id: Optional[UUID] = None
    name: str
    description: Optional[str] = None
    is_system: bool = False
    permissions: List[str] = Field(default_factory=list)
    member_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, role: Role) -> "RoleResponse":
        return cls(
            id=role.id.value,
            tenant_id=role.tenant_id.value if role.tenant_id else None,
            name=role.name,
            description=role.description,
            is_system=role.is_system,
            permissions=sorted(role.permission_codes),
            member_count=role.member_count,
            created_at=role.created_at,
            updated_at=role.updated_at,
        )


class RoleCreateRequest(BaseSchema):
    """Create a tenant role."""
    tenant_id: UUID
    name: str = Field(..., min_length=1, max_length=100, description="Role name, unique per tenant")
    description: Optional[str] = Field(None, max_length=500)
    permissions: List[str] = Field(default_factory=list, description="Initial permission codes")


class RoleUpdateRequest(BaseSchema):
    """Rename a role or change its description."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class RolePermissionsRequest(BaseSchema):
    """Wholesale permission replacement."""
    permissions: List[str] = Field(default_factory=list)


class RolePermissionsResponse(BaseSchema):
    role_id: UUID
    permissions: List[str] = Field(default_factory=list)
    warning: Optional[str] = None
