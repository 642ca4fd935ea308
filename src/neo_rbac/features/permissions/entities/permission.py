"""Permission domain entity for neo-rbac permissions feature.

Represents a catalog permission with a dot-structured ``<module>.<action>``
code. A module-level wildcard is written ``<module>.*``.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from ....config.constants import PermissionTokens
from ....core.exceptions import InvalidPermissionError


_CODE_PATTERN = re.compile(r'^([a-z0-9_]+)\.([a-z0-9_]+|\*)$')


@dataclass(frozen=True)
class PermissionCode:
    """Immutable value object for a permission code with format validation."""
    
    value: str
    
    def __post_init__(self):
        """Validate permission code format: module.action or module.*"""
        if not isinstance(self.value, str) or not _CODE_PATTERN.match(self.value):
            raise InvalidPermissionError(
                f"Permission code must be in format 'module.action' or 'module.*', got: {self.value!r}",
                details={"code": self.value}
            )
    
    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check a raw string against the code format without raising."""
        return isinstance(value, str) and bool(_CODE_PATTERN.match(value))
    
    @property
    def module(self) -> str:
        return self.value.split(PermissionTokens.SEPARATOR, 1)[0]
    
    @property
    def action(self) -> str:
        return self.value.split(PermissionTokens.SEPARATOR, 1)[1]
    
    @property
    def is_wildcard(self) -> bool:
        return self.action == PermissionTokens.MODULE_WILDCARD
    
    def grants(self, required: str) -> bool:
        """Check whether holding this code satisfies ``required``."""
        return code_grants(self.value, required)
    
    def __str__(self) -> str:
        return self.value


def code_grants(granted: str, required: str) -> bool:
    """Match one held code against a required code.
    
    Exact equality, or ``<module>.*`` whose prefix up to and including the
    dot starts ``required``; ``projects.*`` never matches ``projectsx.edit``.
    """
    if granted == required:
        return True
    if granted.endswith(PermissionTokens.MODULE_WILDCARD_SUFFIX):
        prefix = granted[:-len(PermissionTokens.MODULE_WILDCARD)]
        return required.startswith(prefix)
    return False


@dataclass
class Permission:
    """Domain entity representing a catalog permission."""
    
    id: Optional[UUID]
    code: PermissionCode
    module: str
    action: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    
    def __post_init__(self):
        """Validate module/action match the code."""
        if self.code.module != self.module:
            raise InvalidPermissionError(f"Permission module mismatch: code={self.code.module}, field={self.module}")
        if self.code.action != self.action:
            raise InvalidPermissionError(f"Permission action mismatch: code={self.code.action}, field={self.action}")
    
    @classmethod
    def from_code(cls, code: str, description: Optional[str] = None, id: Optional[UUID] = None) -> 'Permission':
        """Build a permission whose module/action are derived from its code."""
        permission_code = PermissionCode(code)
        return cls(
            id=id,
            code=permission_code,
            module=permission_code.module,
            action=permission_code.action,
            description=description,
        )
    
    @property
    def is_wildcard(self) -> bool:
        return self.code.is_wildcard
    
    def __str__(self) -> str:
        return f"Permission({self.code})"
