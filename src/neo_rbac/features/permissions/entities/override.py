"""Resource membership override entity.

An override grants one actor a resource-scoped set of permission codes
independent of their role. It is an allow-list: it only ever adds access.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable

from ....config.constants import PermissionTokens
from ....core.exceptions import InvalidPermissionError
from ....core.value_objects import ActorId, ResourceId
from .permission import PermissionCode


def validate_override_codes(codes: Iterable[str]) -> FrozenSet[str]:
    """Accept concrete codes and the literal ``*``; reject module wildcards.

    Raises:
        InvalidPermissionError: If any entry is malformed or a ``<module>.*``
    """
    accepted = set()
    rejected = []
    for code in codes:
        if code == PermissionTokens.OVERRIDE_WILDCARD:
            accepted.add(code)
        elif PermissionCode.is_valid(code) and not PermissionCode(code).is_wildcard:
            accepted.add(code)
        else:
            rejected.append(code)
    if rejected:
        raise InvalidPermissionError(
            f"Invalid override entries: {', '.join(map(str, rejected))}",
            details={"invalid_codes": [str(code) for code in rejected]}
        )
    return frozenset(accepted)


@dataclass(frozen=True)
class ResourceOverride:
    """Per-(resource, actor) permission grant."""
    
    resource_id: ResourceId
    actor_id: ActorId
    permissions: FrozenSet[str] = field(default_factory=frozenset)
    
    def __post_init__(self):
        object.__setattr__(self, 'permissions', frozenset(self.permissions))
    
    @property
    def grants_everything(self) -> bool:
        return PermissionTokens.OVERRIDE_WILDCARD in self.permissions
    
    def grants(self, required: str) -> bool:
        """Exact code or the literal ``*`` token; no module wildcards here."""
        return required in self.permissions or self.grants_everything
