"""
API endpoints for the permission catalog and the caller's own permissions.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query

from ...core.value_objects import ActorId
from ...features.permissions.services import PermissionCatalogService, PermissionResolver
from ..dependencies import get_catalog_service, get_current_actor_id, get_resolver, require_admin
from ..models import (
    APIResponse, CatalogSyncRequest, CatalogSyncResponse,
    EffectivePermissionsResponse, PermissionCatalogResponse, PermissionResponse
)

router = APIRouter(tags=["Permissions"])


@router.get(
    "/permissions",
    response_model=APIResponse[PermissionCatalogResponse],
    summary="List permission catalog"
)
async def list_permissions(
    module: Optional[str] = Query(None, description="Restrict to one module"),
    actor_id: ActorId = Depends(get_current_actor_id),
    service: PermissionCatalogService = Depends(get_catalog_service)
) -> APIResponse[PermissionCatalogResponse]:
    permissions = await service.list_permissions(module=module)

    items = [PermissionResponse.from_entity(p) for p in permissions]
    grouped = {}
    for item in items:
        grouped.setdefault(item.module, []).append(item)

    return APIResponse.success_response(
        data=PermissionCatalogResponse(permissions=items, grouped=grouped),
        message="Permissions retrieved successfully"
    )


@router.post(
    "/permissions/sync",
    response_model=APIResponse[CatalogSyncResponse],
    summary="Sync permission catalog",
    description="Insert missing registry permissions and refresh the tenant's Admin role"
)
async def sync_permissions(
    request: Optional[CatalogSyncRequest] = Body(None),
    actor_id: ActorId = Depends(require_admin),
    service: PermissionCatalogService = Depends(get_catalog_service)
) -> APIResponse[CatalogSyncResponse]:
    tenant_id = request.tenant_id if request else None
    result = await service.sync_catalog(tenant_id)
    return APIResponse.success_response(
        data=CatalogSyncResponse(**result.to_dict()),
        message=f"Synced {result.inserted} new permissions"
    )


@router.get(
    "/me/permissions",
    response_model=APIResponse[EffectivePermissionsResponse],
    summary="Get my permissions"
)
async def my_permissions(
    resource_id: Optional[UUID] = Query(None, description="Include overrides on this resource"),
    actor_id: ActorId = Depends(get_current_actor_id),
    resolver: PermissionResolver = Depends(get_resolver)
) -> APIResponse[EffectivePermissionsResponse]:
    effective = await resolver.get_effective_permissions(actor_id, resource_id)
    return APIResponse.success_response(
        data=EffectivePermissionsResponse.from_entity(effective)
    )
