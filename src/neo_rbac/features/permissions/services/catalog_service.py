"""Permission catalog service.

Read access to the closed set of permission codes plus the sync that keeps
the stored catalog in step with the permission registry.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union
from uuid import UUID

from ....config.constants import DefaultRoles
from ....core.value_objects import TenantId
from ..entities import Permission, PermissionCatalog, PermissionCode, RoleRepository
from ..registry import get_registry_permissions


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogSyncResult:
    """Counts reported by a catalog sync."""

    inserted: int
    total: int
    admin_role_updated: bool

    def to_dict(self) -> Dict[str, Union[int, bool]]:
        return {
            "inserted": self.inserted,
            "total": self.total,
            "admin_role_updated": self.admin_role_updated,
        }


class PermissionCatalogService:
    """Service over the permission catalog."""

    def __init__(
        self,
        catalog: PermissionCatalog,
        role_repository: RoleRepository,
        registry: Optional[List[Permission]] = None
    ):
        self.catalog = catalog
        self.role_repository = role_repository
        self.registry = registry if registry is not None else get_registry_permissions()

    async def exists(self, code: str) -> bool:
        """Check catalog membership; malformed codes are never members."""
        if not PermissionCode.is_valid(code):
            return False
        return await self.catalog.exists(code)

    async def list_permissions(self, module: Optional[str] = None) -> List[Permission]:
        """List catalog permissions ordered by module then action."""
        permissions = await self.catalog.list_all()
        if module:
            permissions = [p for p in permissions if p.module == module]
        return permissions

    async def list_grouped(self) -> Dict[str, List[Permission]]:
        """Catalog permissions keyed by module."""
        grouped: Dict[str, List[Permission]] = {}
        for permission in await self.catalog.list_all():
            grouped.setdefault(permission.module, []).append(permission)
        return grouped

    async def sync_catalog(self, tenant_id: Optional[Union[TenantId, UUID, str]] = None) -> CatalogSyncResult:
        """Insert registry codes missing from the catalog.

        When a tenant is given, its Admin system role is also brought up to
        the full catalog.
        """
        inserted = await self.catalog.insert_missing(self.registry)
        all_codes = {permission.code.value for permission in await self.catalog.list_all()}

        if inserted:
            logger.info(f"Permission catalog sync inserted {inserted} new permissions")

        admin_updated = False
        if tenant_id is not None:
            tid = tenant_id if isinstance(tenant_id, TenantId) else TenantId(tenant_id)
            admin_role = await self.role_repository.get_by_name(tid, DefaultRoles.ADMIN)
            if admin_role is None:
                logger.warning(f"No {DefaultRoles.ADMIN} role for tenant {tid}; skipping role sync")
            else:
                current = await self.role_repository.get_permission_codes(admin_role.id)
                if current != all_codes:
                    await self.role_repository.replace_permissions(admin_role.id, all_codes)
                    admin_updated = True
                    logger.info(f"{DefaultRoles.ADMIN} role of tenant {tid} now holds {len(all_codes)} permissions")

        return CatalogSyncResult(inserted=inserted, total=len(all_codes), admin_role_updated=admin_updated)
