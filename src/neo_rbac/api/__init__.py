"""FastAPI integration for neo-rbac."""

from .app import create_app
from .dependencies import (
    RequirePermission,
    require_admin,
    get_current_actor_id,
    get_resolver,
    get_role_service,
    get_catalog_service,
)
from .exception_handlers import ExceptionHandlerRegistry, register_exception_handlers

__all__ = [
    "create_app",
    "RequirePermission",
    "require_admin",
    "get_current_actor_id",
    "get_resolver",
    "get_role_service",
    "get_catalog_service",
    "ExceptionHandlerRegistry",
    "register_exception_handlers",
]
