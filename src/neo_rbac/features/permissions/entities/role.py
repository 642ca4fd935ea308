"""Role domain entity for neo-rbac permissions feature.

A role is a named, tenant-scoped bundle of permission codes. System roles
are seeded per tenant and cannot be deleted.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import FrozenSet, Iterable, Optional

from ....core.exceptions import ValidationError
from ....core.value_objects import RoleId, TenantId
from .permission import code_grants


MAX_ROLE_NAME_LENGTH = 100


@dataclass(frozen=True)
class Role:
    """Domain entity representing a tenant role and its flattened codes."""
    
    id: Optional[RoleId]
    tenant_id: Optional[TenantId]
    name: str
    description: Optional[str] = None
    is_system: bool = False
    permission_codes: FrozenSet[str] = field(default_factory=frozenset)
    member_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    def __post_init__(self):
        name = (self.name or "").strip()
        if not name:
            raise ValidationError("Role name cannot be empty")
        if len(name) > MAX_ROLE_NAME_LENGTH:
            raise ValidationError(
                f"Role name cannot exceed {MAX_ROLE_NAME_LENGTH} characters, got: {len(name)}"
            )
        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'permission_codes', frozenset(self.permission_codes))
    
    def grants(self, required: str) -> bool:
        """Check if any code held by this role satisfies ``required``."""
        return any(code_grants(code, required) for code in self.permission_codes)
    
    def with_permissions(self, codes: Iterable[str]) -> 'Role':
        """Copy of this role holding exactly ``codes``."""
        return replace(self, permission_codes=frozenset(codes))
    
    def __str__(self) -> str:
        return f"Role({self.name})"
    
    def __repr__(self) -> str:
        flag_info = " [system]" if self.is_system else ""
        return f"Role({self.name!r}, id={self.id}, permissions={len(self.permission_codes)}{flag_info})"
