"""
API endpoints for role management.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ...config.settings import RBACSettings
from ...core.exceptions import ValidationError
from ...core.value_objects import ActorId
from ...features.permissions.services import RoleAdministrationService
from ..dependencies import get_app_settings, get_current_actor_id, get_role_service, require_admin
from ..models import (
    APIResponse, RoleCreateRequest, RolePermissionsRequest, RolePermissionsResponse,
    RoleResponse, RoleUpdateRequest
)

router = APIRouter(prefix="/roles", tags=["Roles"])


@router.get(
    "",
    response_model=APIResponse[List[RoleResponse]],
    summary="List roles",
    description="List a tenant's roles ordered by name with member counts"
)
async def list_roles(
    tenant_id: Optional[UUID] = Query(None, description="Tenant whose roles to list"),
    actor_id: ActorId = Depends(get_current_actor_id),
    settings: RBACSettings = Depends(get_app_settings),
    service: RoleAdministrationService = Depends(get_role_service)
) -> APIResponse[List[RoleResponse]]:
    tenant = tenant_id or settings.default_tenant_id
    if tenant is None:
        raise ValidationError("tenant_id is required")

    roles = await service.list_roles(tenant)
    return APIResponse.success_response(
        data=[RoleResponse.from_entity(role) for role in roles],
        message="Roles retrieved successfully"
    )


@router.post(
    "",
    response_model=APIResponse[RoleResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new role"
)
async def create_role(
    request: RoleCreateRequest,
    actor_id: ActorId = Depends(require_admin),
    service: RoleAdministrationService = Depends(get_role_service)
) -> APIResponse[RoleResponse]:
    """
    Create a tenant role with an initial permission set.

    Returns 409 when the name is taken and 400 for unknown codes.
    """
    role = await service.create_role(
        tenant_id=request.tenant_id,
        name=request.name,
        description=request.description,
        permission_codes=request.permissions,
    )
    return APIResponse.success_response(
        data=RoleResponse.from_entity(role),
        message="Role created successfully"
    )


@router.get(
    "/{role_id}",
    response_model=APIResponse[RoleResponse],
    summary="Get role details"
)
async def get_role(
    role_id: UUID,
    actor_id: ActorId = Depends(get_current_actor_id),
    service: RoleAdministrationService = Depends(get_role_service)
) -> APIResponse[RoleResponse]:
    role = await service.get_role(role_id)
    return APIResponse.success_response(
        data=RoleResponse.from_entity(role),
        message="Role retrieved successfully"
    )


@router.patch(
    "/{role_id}",
    response_model=APIResponse[RoleResponse],
    summary="Update a role"
)
async def update_role(
    role_id: UUID,
    request: RoleUpdateRequest,
    actor_id: ActorId = Depends(require_admin),
    service: RoleAdministrationService = Depends(get_role_service)
) -> APIResponse[RoleResponse]:
    role = await service.update_role(role_id, name=request.name, description=request.description)
    return APIResponse.success_response(
        data=RoleResponse.from_entity(role),
        message="Role updated successfully"
    )


@router.delete(
    "/{role_id}",
    response_model=APIResponse[None],
    summary="Delete a role",
    description="Delete a role that is neither a system role nor assigned to any user"
)
async def delete_role(
    role_id: UUID,
    actor_id: ActorId = Depends(require_admin),
    service: RoleAdministrationService = Depends(get_role_service)
) -> APIResponse[None]:
    await service.delete_role(role_id)
    return APIResponse.success_response(message="Role deleted successfully")


@router.get(
    "/{role_id}/permissions",
    response_model=APIResponse[RolePermissionsResponse],
    summary="Get role permissions"
)
async def get_role_permissions(
    role_id: UUID,
    actor_id: ActorId = Depends(get_current_actor_id),
    service: RoleAdministrationService = Depends(get_role_service)
) -> APIResponse[RolePermissionsResponse]:
    codes = await service.get_role_permissions(role_id)
    return APIResponse.success_response(
        data=RolePermissionsResponse(role_id=role_id, permissions=sorted(codes)),
        message="Role permissions retrieved successfully"
    )


@router.put(
    "/{role_id}/permissions",
    response_model=APIResponse[RolePermissionsResponse],
    summary="Replace role permissions",
    description="Replace the role's permission set wholesale"
)
async def replace_role_permissions(
    role_id: UUID,
    request: RolePermissionsRequest,
    actor_id: ActorId = Depends(require_admin),
    service: RoleAdministrationService = Depends(get_role_service)
) -> APIResponse[RolePermissionsResponse]:
    result = await service.replace_role_permissions(role_id, request.permissions)
    return APIResponse.success_response(
        data=RolePermissionsResponse(
            role_id=role_id,
            permissions=sorted(result.permission_codes),
            warning=result.warning,
        ),
        message="Permissions updated successfully"
    )
