"""Permissions feature for neo-rbac.

Feature-First layout for permission resolution and role management:
- entities/: Permission domain objects, roles, decisions and protocols
- services/: Resolution, role administration and catalog logic
- repositories/: AsyncPG implementations of the protocols
- registry: Predefined permission nodes
"""

# Core permission entities and protocols
from .entities import (
    Permission, PermissionCode, Role, ActorProfile, ResourceOverride,
    AccessDecision, DecisionSource, EffectivePermissions,
    PermissionCatalog, RoleRepository, ActorDirectory, ResourceMembershipStore,
)

# Services
from .services import (
    PermissionResolver, RoleAdministrationService, PermissionReplaceResult,
    PermissionCatalogService, CatalogSyncResult,
)

# Concrete repository implementations
from .repositories import (
    AsyncPGPermissionRepository, AsyncPGRoleRepository,
    AsyncPGActorDirectory, AsyncPGResourceMembershipStore,
)

from .registry import PERMISSION_NODES, DEFAULT_EMPLOYEE_PERMISSIONS, get_registry_permissions
from .factory import RBACServices, create_permission_services, create_asyncpg_services

__all__ = [
    # Entities
    "Permission",
    "PermissionCode",
    "Role",
    "ActorProfile",
    "ResourceOverride",
    "AccessDecision",
    "DecisionSource",
    "EffectivePermissions",

    # Protocols
    "PermissionCatalog",
    "RoleRepository",
    "ActorDirectory",
    "ResourceMembershipStore",

    # Services
    "PermissionResolver",
    "RoleAdministrationService",
    "PermissionReplaceResult",
    "PermissionCatalogService",
    "CatalogSyncResult",

    # Repository Implementations
    "AsyncPGPermissionRepository",
    "AsyncPGRoleRepository",
    "AsyncPGActorDirectory",
    "AsyncPGResourceMembershipStore",

    # Registry
    "PERMISSION_NODES",
    "DEFAULT_EMPLOYEE_PERMISSIONS",
    "get_registry_permissions",

    # Wiring
    "RBACServices",
    "create_permission_services",
    "create_asyncpg_services",
]
