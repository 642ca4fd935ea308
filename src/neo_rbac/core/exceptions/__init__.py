"""Exceptions module for neo-rbac.

This module provides the complete exception hierarchy for neo-rbac.
"""

from .base import (
    NeoRBACError,
    get_http_status_code,
    create_error_response,
)

from .domain import (
    # Configuration Errors
    ConfigurationError,
    
    # Validation Errors
    ValidationError,
    InvalidPermissionError,
    
    # Database Errors
    DatabaseError,
    StoreUnavailableError,
    
    # Authentication Errors
    AuthenticationError,
    
    # Authorization Errors
    AuthorizationError,
    PermissionDeniedError,
    
    # Role Errors
    RoleError,
    RoleNotFoundError,
    RoleConflictError,
)

from .http_mapping import HTTP_STATUS_MAP

__all__ = [
    # Base
    "NeoRBACError",
    "get_http_status_code",
    "create_error_response",
    "HTTP_STATUS_MAP",
    
    # Configuration
    "ConfigurationError",
    
    # Validation
    "ValidationError",
    "InvalidPermissionError",
    
    # Database
    "DatabaseError",
    "StoreUnavailableError",
    
    # Authentication / Authorization
    "AuthenticationError",
    "AuthorizationError",
    "PermissionDeniedError",
    
    # Roles
    "RoleError",
    "RoleNotFoundError",
    "RoleConflictError",
]
