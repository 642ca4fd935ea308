"""HTTP status code mapping for exceptions."""

from typing import Dict, Type

from .base import NeoRBACError
from .domain import (
    ConfigurationError,
    ValidationError,
    InvalidPermissionError,
    DatabaseError,
    StoreUnavailableError,
    AuthenticationError,
    AuthorizationError,
    PermissionDeniedError,
    RoleError,
    RoleNotFoundError,
    RoleConflictError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    ValidationError: 400,
    InvalidPermissionError: 400,
    
    # 401 Unauthorized
    AuthenticationError: 401,
    
    # 403 Forbidden
    AuthorizationError: 403,
    PermissionDeniedError: 403,
    
    # 404 Not Found
    RoleNotFoundError: 404,
    
    # 409 Conflict
    RoleConflictError: 409,
    
    # 500 Internal Server Error
    RoleError: 500,
    DatabaseError: 500,
    ConfigurationError: 500,
    
    # 503 Service Unavailable
    StoreUnavailableError: 503,
    
    # Default for NeoRBACError
    NeoRBACError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception, walking its MRO.
    
    Args:
        exception: The exception instance
        
    Returns:
        HTTP status code (500 when no mapping applies)
    """
    for exception_type in type(exception).__mro__:
        if exception_type in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exception_type]
    return 500
