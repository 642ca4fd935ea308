"""Constants and enums for neo-rbac.

These correspond to the values stored in the users, roles and
permissions tables.
"""

from enum import Enum
from typing import Final


class GlobalRole(str, Enum):
    """Global role flag stored on every user profile."""
    
    ADMIN = "admin"
    EMPLOYEE = "employee"


class PermissionTokens:
    """Reserved tokens inside permission codes."""
    
    SEPARATOR: Final[str] = "."
    MODULE_WILDCARD: Final[str] = "*"
    MODULE_WILDCARD_SUFFIX: Final[str] = ".*"
    # Only meaningful inside a resource override set
    OVERRIDE_WILDCARD: Final[str] = "*"


class DefaultRoles:
    """System roles seeded for every tenant."""
    
    ADMIN: Final[str] = "Admin"
    EMPLOYEE: Final[str] = "Employee"
    ADMIN_DESCRIPTION: Final[str] = "Full system access"
    EMPLOYEE_DESCRIPTION: Final[str] = "Standard employee access"


class DatabaseTables:
    """Table names used by the asyncpg repositories."""
    
    PERMISSIONS: Final[str] = "permissions"
    ROLES: Final[str] = "roles"
    ROLE_PERMISSIONS: Final[str] = "role_permissions"
    USERS: Final[str] = "users"
    RESOURCE_MEMBERS: Final[str] = "project_members"


class DenialReasons:
    """Reason strings attached to denied decisions."""
    
    ACTOR_NOT_FOUND: Final[str] = "actor not found"
    CHECK_FAILED: Final[str] = "permission check failed"
    PERMISSION_REQUIRED: Final[str] = "permission denied: {code} is required"
    # Client-visible message; never carries the internal reason
    PUBLIC_MESSAGE: Final[str] = "Permission denied: {code} is required"
