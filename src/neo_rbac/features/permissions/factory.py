"""Service wiring for the permissions feature.

Builds the resolver and administration services from any four
implementations of the collaborator protocols.
"""

from dataclasses import dataclass
from typing import Optional

from .entities import ActorDirectory, PermissionCatalog, ResourceMembershipStore, RoleRepository
from .repositories import (
    AsyncPGActorDirectory, AsyncPGPermissionRepository,
    AsyncPGResourceMembershipStore, AsyncPGRoleRepository
)
from .services import PermissionCatalogService, PermissionResolver, RoleAdministrationService


@dataclass
class RBACServices:
    """Everything a host application needs from the engine."""

    resolver: PermissionResolver
    roles: RoleAdministrationService
    catalog: PermissionCatalogService
    membership_store: ResourceMembershipStore
    db_manager: Optional[object] = None


def create_permission_services(
    catalog: PermissionCatalog,
    role_repository: RoleRepository,
    actor_directory: ActorDirectory,
    membership_store: ResourceMembershipStore,
    db_manager: Optional[object] = None
) -> RBACServices:
    """Wire services around the given collaborators."""
    return RBACServices(
        resolver=PermissionResolver(actor_directory, role_repository, membership_store),
        roles=RoleAdministrationService(catalog, role_repository),
        catalog=PermissionCatalogService(catalog, role_repository),
        membership_store=membership_store,
        db_manager=db_manager,
    )


def create_asyncpg_services(db_manager) -> RBACServices:
    """Production wiring over a shared DatabaseManager."""
    return create_permission_services(
        catalog=AsyncPGPermissionRepository(db_manager),
        role_repository=AsyncPGRoleRepository(db_manager),
        actor_directory=AsyncPGActorDirectory(db_manager),
        membership_store=AsyncPGResourceMembershipStore(db_manager),
        db_manager=db_manager,
    )
