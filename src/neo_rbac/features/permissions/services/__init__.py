"""Permission services package.

Resolution, role administration and catalog services.
"""

from .permission_resolver import PermissionResolver
from .role_admin_service import RoleAdministrationService, PermissionReplaceResult
from .catalog_service import PermissionCatalogService, CatalogSyncResult

__all__ = [
    "PermissionResolver",
    "RoleAdministrationService",
    "PermissionReplaceResult",
    "PermissionCatalogService",
    "CatalogSyncResult",
]
