"""
FastAPI dependencies for actor identity, service lookup and permission gates.

Authentication happens upstream; these dependencies only read the actor id
a gateway or middleware already established.
"""

import logging
from typing import List, Optional, Union

from fastapi import Depends, Request

from ..config.constants import DenialReasons
from ..config.settings import RBACSettings, get_settings
from ..core.exceptions import AuthenticationError, ConfigurationError, PermissionDeniedError
from ..core.value_objects import ActorId
from ..features.permissions.factory import RBACServices
from ..features.permissions.services import (
    PermissionCatalogService, PermissionResolver, RoleAdministrationService
)

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> RBACSettings:
    """Settings attached to the app, falling back to the environment."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_services(request: Request) -> RBACServices:
    """Service bundle registered on the app."""
    services = getattr(request.app.state, "rbac_services", None)
    if services is None:
        raise ConfigurationError("RBAC services are not configured on this application")
    return services


def get_resolver(services: RBACServices = Depends(get_services)) -> PermissionResolver:
    return services.resolver


def get_role_service(services: RBACServices = Depends(get_services)) -> RoleAdministrationService:
    return services.roles


def get_catalog_service(services: RBACServices = Depends(get_services)) -> PermissionCatalogService:
    return services.catalog


def get_current_actor_id(
    request: Request,
    settings: RBACSettings = Depends(get_app_settings)
) -> ActorId:
    """Actor id from ``request.state.actor_id`` or the configured header.

    Raises:
        AuthenticationError: If no valid actor id is present
    """
    raw = getattr(request.state, "actor_id", None) or request.headers.get(settings.actor_header)
    if not raw:
        raise AuthenticationError("Authentication required")

    try:
        return raw if isinstance(raw, ActorId) else ActorId(raw)
    except ValueError:
        raise AuthenticationError("Invalid actor identifier")


class RequirePermission:
    """
    Permission gate for route handlers.

    Usage:
        @router.get("/projects/{project_id}")
        async def read(actor = Depends(RequirePermission("projects.view", resource_param="project_id"))):
            ...

    Args:
        permissions: One code or a list of codes
        any_of: If True, any listed code suffices; otherwise all are required
        resource_param: Path or query parameter naming the resource in scope
    """

    def __init__(
        self,
        permissions: Union[str, List[str]],
        any_of: bool = False,
        resource_param: Optional[str] = None
    ):
        self.permissions = permissions if isinstance(permissions, list) else [permissions]
        self.any_of = any_of
        self.resource_param = resource_param

    def _resource_id(self, request: Request) -> Optional[str]:
        if not self.resource_param:
            return None
        return request.path_params.get(self.resource_param) or request.query_params.get(self.resource_param)

    async def __call__(
        self,
        request: Request,
        actor_id: ActorId = Depends(get_current_actor_id),
        resolver: PermissionResolver = Depends(get_resolver)
    ) -> ActorId:
        resource_id = self._resource_id(request)

        if len(self.permissions) == 1:
            await resolver.verify(actor_id, self.permissions[0], resource_id)
            return actor_id

        if self.any_of:
            allowed = await resolver.any_of(actor_id, self.permissions, resource_id)
        else:
            allowed = await resolver.all_of(actor_id, self.permissions, resource_id)

        if not allowed:
            required = " or ".join(self.permissions) if self.any_of else ", ".join(self.permissions)
            logger.info(f"Actor {actor_id} denied on {request.url.path}: requires {required}")
            raise PermissionDeniedError(
                DenialReasons.PUBLIC_MESSAGE.format(code=required),
                details={"permissions": self.permissions, "any_of": self.any_of}
            )

        return actor_id


async def require_admin(
    actor_id: ActorId = Depends(get_current_actor_id),
    resolver: PermissionResolver = Depends(get_resolver)
) -> ActorId:
    """Gate for administration writes: the actor must carry the admin flag."""
    if not await resolver.is_admin(actor_id):
        raise PermissionDeniedError("Only admins can manage roles and permissions")
    return actor_id
