"""Authorization decision value objects."""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional

from ....core.value_objects import ActorId, ResourceId


class DecisionSource(str, Enum):
    """Step of the resolution pipeline that produced a decision."""
    
    ADMIN_BYPASS = "admin_bypass"
    ROLE = "role"
    RESOURCE_OVERRIDE = "resource_override"
    ACTOR_NOT_FOUND = "actor_not_found"
    STORE_UNAVAILABLE = "store_unavailable"
    NO_GRANT = "no_grant"


@dataclass(frozen=True)
class AccessDecision:
    """Allow/deny verdict for one (actor, code, resource) check."""
    
    allowed: bool
    permission_code: str
    source: DecisionSource
    reason: Optional[str] = None
    actor_id: Optional[ActorId] = None
    resource_id: Optional[ResourceId] = None
    
    @classmethod
    def allow(
        cls,
        permission_code: str,
        source: DecisionSource,
        actor_id: Optional[ActorId] = None,
        resource_id: Optional[ResourceId] = None
    ) -> 'AccessDecision':
        return cls(True, permission_code, source, None, actor_id, resource_id)
    
    @classmethod
    def deny(
        cls,
        permission_code: str,
        source: DecisionSource,
        reason: str,
        actor_id: Optional[ActorId] = None,
        resource_id: Optional[ResourceId] = None
    ) -> 'AccessDecision':
        return cls(False, permission_code, source, reason, actor_id, resource_id)
    
    @property
    def denied(self) -> bool:
        return not self.allowed


@dataclass(frozen=True)
class EffectivePermissions:
    """Codes an actor holds right now, for display and client-side gating."""
    
    actor_id: Optional[ActorId]
    is_admin: bool = False
    permissions: FrozenSet[str] = field(default_factory=frozenset)
    
    def __post_init__(self):
        object.__setattr__(self, 'permissions', frozenset(self.permissions))
    
    def as_map(self) -> dict:
        """``{code: True}`` mapping, ``{"*": True}`` for administrators."""
        return {code: True for code in sorted(self.permissions)}
