"""Domain-specific exceptions for neo-rbac.

This module defines exceptions that relate to authorization decisions,
role administration and the stores backing them.
"""

from .base import NeoRBACError


# Configuration Errors
class ConfigurationError(NeoRBACError):
    """Raised when there's a configuration issue."""
    pass


# Validation Errors
class ValidationError(NeoRBACError):
    """Raised when caller input fails validation."""
    pass


class InvalidPermissionError(ValidationError):
    """Raised when a permission code is malformed or absent from the catalog."""
    pass


# Database Errors
class DatabaseError(NeoRBACError):
    """Base class for database-related errors."""
    pass


class StoreUnavailableError(DatabaseError):
    """Raised when a backing store query or mutation fails unexpectedly."""
    pass


# Authentication Errors
class AuthenticationError(NeoRBACError):
    """Raised when no authenticated actor is available for a request."""
    pass


# Authorization Errors
class AuthorizationError(NeoRBACError):
    """Base class for authorization-related errors."""
    pass


class PermissionDeniedError(AuthorizationError):
    """Raised when an actor lacks the permission an operation requires."""
    pass


# Role Errors
class RoleError(NeoRBACError):
    """Base class for role administration errors."""
    pass


class RoleNotFoundError(RoleError):
    """Raised when a role id does not exist."""
    pass


class RoleConflictError(RoleError):
    """Raised on duplicate role names or on deleting a system/referenced role."""
    pass
