"""Value objects for identifiers in neo-rbac.

This module defines immutable value objects for the identifiers the
authorization engine passes between its collaborators. All of them wrap
UUIDs, matching the keys of the underlying tables.
"""

from dataclasses import dataclass
from typing import Union
from uuid import UUID, uuid4


def _coerce_uuid(value: Union[UUID, str], label: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (ValueError, TypeError):
        raise ValueError(f"{label} must be a valid UUID, got: {value}")


@dataclass(frozen=True)
class ActorId:
    """Authenticated actor (user) identifier."""
    value: UUID
    
    def __post_init__(self):
        object.__setattr__(self, 'value', _coerce_uuid(self.value, "ActorId"))
    
    @classmethod
    def generate(cls) -> 'ActorId':
        return cls(uuid4())
    
    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TenantId:
    """Tenant (organization) identifier."""
    value: UUID
    
    def __post_init__(self):
        object.__setattr__(self, 'value', _coerce_uuid(self.value, "TenantId"))
    
    @classmethod
    def generate(cls) -> 'TenantId':
        return cls(uuid4())
    
    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RoleId:
    """Role identifier."""
    value: UUID
    
    def __post_init__(self):
        object.__setattr__(self, 'value', _coerce_uuid(self.value, "RoleId"))
    
    @classmethod
    def generate(cls) -> 'RoleId':
        return cls(uuid4())
    
    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ResourceId:
    """Identifier of a permission-scoped resource, e.g. a project."""
    value: UUID
    
    def __post_init__(self):
        object.__setattr__(self, 'value', _coerce_uuid(self.value, "ResourceId"))
    
    @classmethod
    def generate(cls) -> 'ResourceId':
        return cls(uuid4())
    
    def __str__(self) -> str:
        return str(self.value)
