"""Permission entities package.

Domain entities and protocols for permission resolution and role management.
"""

from .permission import Permission, PermissionCode, code_grants
from .role import Role
from .actor import ActorProfile
from .override import ResourceOverride, validate_override_codes
from .decision import AccessDecision, DecisionSource, EffectivePermissions
from .protocols import (
    PermissionCatalog,
    RoleRepository,
    ActorDirectory,
    ResourceMembershipStore,
)

__all__ = [
    # Domain entities
    "Permission",
    "PermissionCode",
    "code_grants",
    "Role",
    "ActorProfile",
    "ResourceOverride",
    "validate_override_codes",
    "AccessDecision",
    "DecisionSource",
    "EffectivePermissions",
    
    # Protocols
    "PermissionCatalog",
    "RoleRepository",
    "ActorDirectory",
    "ResourceMembershipStore",
]
