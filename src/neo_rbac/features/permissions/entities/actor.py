"""Actor profile entity: the slice of a user record the engine reads."""

from dataclasses import dataclass
from typing import Optional

from ....config.constants import GlobalRole
from ....core.value_objects import ActorId, RoleId, TenantId


@dataclass(frozen=True)
class ActorProfile:
    """Global role flag and assigned role of an authenticated actor."""
    
    actor_id: ActorId
    global_role: GlobalRole = GlobalRole.EMPLOYEE
    role_id: Optional[RoleId] = None
    tenant_id: Optional[TenantId] = None
    
    def __post_init__(self):
        if not isinstance(self.global_role, GlobalRole):
            object.__setattr__(self, 'global_role', GlobalRole(self.global_role))
    
    @property
    def is_admin(self) -> bool:
        return self.global_role is GlobalRole.ADMIN
    
    @property
    def has_role(self) -> bool:
        return self.role_id is not None
