"""Value objects for neo-rbac."""

from .identifiers import ActorId, TenantId, RoleId, ResourceId

__all__ = [
    "ActorId",
    "TenantId",
    "RoleId",
    "ResourceId",
]
