"""Permission repositories package.

AsyncPG implementations of the permission feature protocols.
"""

from .permission_repository import AsyncPGPermissionRepository
from .role_repository import AsyncPGRoleRepository
from .actor_repository import AsyncPGActorDirectory
from .membership_repository import AsyncPGResourceMembershipStore

__all__ = [
    "AsyncPGPermissionRepository",
    "AsyncPGRoleRepository",
    "AsyncPGActorDirectory",
    "AsyncPGResourceMembershipStore",
]
