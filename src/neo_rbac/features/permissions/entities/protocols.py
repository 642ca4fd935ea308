"""Protocol interfaces for permission feature dependency injection.

Defines the four collaborator contracts the resolution engine and role
administration depend on. Production implementations use asyncpg; tests
use in-memory fakes satisfying the same contracts.
"""

from abc import abstractmethod
from typing import Iterable, List, Optional, Protocol, Set, runtime_checkable

from ....core.value_objects import ActorId, ResourceId, RoleId, TenantId
from .actor import ActorProfile
from .override import ResourceOverride
from .permission import Permission
from .role import Role


@runtime_checkable
class PermissionCatalog(Protocol):
    """Protocol for the closed universe of permission codes."""
    
    @abstractmethod
    async def exists(self, code: str) -> bool:
        """Check if a code is part of the catalog."""
        ...
    
    @abstractmethod
    async def find_missing(self, codes: Iterable[str]) -> Set[str]:
        """Return the subset of ``codes`` absent from the catalog."""
        ...
    
    @abstractmethod
    async def list_all(self) -> List[Permission]:
        """List every permission ordered by module, then action."""
        ...
    
    @abstractmethod
    async def insert_missing(self, permissions: Iterable[Permission]) -> int:
        """Insert permissions whose code is not yet present; return the count inserted."""
        ...


@runtime_checkable
class RoleRepository(Protocol):
    """Protocol for role data access and role/permission assignment."""
    
    @abstractmethod
    async def get_by_id(self, role_id: RoleId) -> Optional[Role]:
        """Get role by ID with its flattened permission codes."""
        ...
    
    @abstractmethod
    async def get_by_name(self, tenant_id: TenantId, name: str) -> Optional[Role]:
        """Get a tenant's role by its unique name."""
        ...
    
    @abstractmethod
    async def list_by_tenant(self, tenant_id: TenantId) -> List[Role]:
        """List a tenant's roles ordered by name, with member counts."""
        ...
    
    @abstractmethod
    async def get_permission_codes(self, role_id: RoleId) -> Set[str]:
        """Flatten a role's permission assignments into plain codes."""
        ...
    
    @abstractmethod
    async def create(self, role: Role) -> Role:
        """Insert a role together with its permission assignments atomically."""
        ...
    
    @abstractmethod
    async def update(self, role: Role) -> Role:
        """Update a role's name and description."""
        ...
    
    @abstractmethod
    async def replace_permissions(self, role_id: RoleId, codes: Set[str]) -> Set[str]:
        """Clear and re-insert a role's assignments in one transaction."""
        ...
    
    @abstractmethod
    async def count_members(self, role_id: RoleId) -> int:
        """Count actor profiles referencing the role."""
        ...
    
    @abstractmethod
    async def delete(self, role_id: RoleId) -> bool:
        """Delete an unreferenced role atomically.
        
        Re-verifies zero references inside the deleting transaction and
        raises RoleConflictError if any appeared.
        """
        ...


@runtime_checkable
class ActorDirectory(Protocol):
    """Protocol for resolving actor profiles."""
    
    @abstractmethod
    async def by_id(self, actor_id: ActorId) -> Optional[ActorProfile]:
        """Return the actor's profile, or None when it does not exist."""
        ...


@runtime_checkable
class ResourceMembershipStore(Protocol):
    """Protocol for per-resource membership overrides."""
    
    @abstractmethod
    async def membership_of(self, resource_id: ResourceId, actor_id: ActorId) -> Optional[ResourceOverride]:
        """Return the actor's override on the resource, or None."""
        ...
    
    @abstractmethod
    async def grant(self, resource_id: ResourceId, actor_id: ActorId, permissions: Iterable[str]) -> ResourceOverride:
        """Create or replace the actor's override on the resource."""
        ...
    
    @abstractmethod
    async def revoke(self, resource_id: ResourceId, actor_id: ActorId) -> bool:
        """Remove the actor from the resource."""
        ...
    
    @abstractmethod
    async def revoke_all(self, resource_id: ResourceId) -> int:
        """Remove every override on a resource (resource deleted)."""
        ...
