"""neo-rbac - Permission resolution engine for multi-tenant project services.

Decides whether an actor may perform a permission-coded action, optionally
scoped to a resource, and administers the tenant roles behind the decision.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import (
    RBACSettings,
    get_settings,
    GlobalRole,
    DefaultRoles,
)

from .core.exceptions import (
    NeoRBACError,
    ConfigurationError,
    ValidationError,
    InvalidPermissionError,
    DatabaseError,
    StoreUnavailableError,
    AuthenticationError,
    AuthorizationError,
    PermissionDeniedError,
    RoleError,
    RoleNotFoundError,
    RoleConflictError,
    get_http_status_code,
    create_error_response,
)

from .core.value_objects import ActorId, TenantId, RoleId, ResourceId

from .features.permissions import (
    Permission,
    PermissionCode,
    Role,
    ActorProfile,
    ResourceOverride,
    AccessDecision,
    DecisionSource,
    EffectivePermissions,
    PermissionCatalog,
    RoleRepository,
    ActorDirectory,
    ResourceMembershipStore,
    PermissionResolver,
    RoleAdministrationService,
    PermissionCatalogService,
    RBACServices,
    create_permission_services,
    create_asyncpg_services,
)

from .database import DatabaseManager

__all__ = [
    "__version__",

    # Configuration
    "RBACSettings",
    "get_settings",
    "GlobalRole",
    "DefaultRoles",

    # Exceptions
    "NeoRBACError",
    "ConfigurationError",
    "ValidationError",
    "InvalidPermissionError",
    "DatabaseError",
    "StoreUnavailableError",
    "AuthenticationError",
    "AuthorizationError",
    "PermissionDeniedError",
    "RoleError",
    "RoleNotFoundError",
    "RoleConflictError",
    "get_http_status_code",
    "create_error_response",

    # Identifiers
    "ActorId",
    "TenantId",
    "RoleId",
    "ResourceId",

    # Permissions feature
    "Permission",
    "PermissionCode",
    "Role",
    "ActorProfile",
    "ResourceOverride",
    "AccessDecision",
    "DecisionSource",
    "EffectivePermissions",
    "PermissionCatalog",
    "RoleRepository",
    "ActorDirectory",
    "ResourceMembershipStore",
    "PermissionResolver",
    "RoleAdministrationService",
    "PermissionCatalogService",
    "RBACServices",
    "create_permission_services",
    "create_asyncpg_services",

    # Database
    "DatabaseManager",
]
