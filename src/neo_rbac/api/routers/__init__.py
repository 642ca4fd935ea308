"""API routers for neo-rbac."""

from .permissions import router as permissions_router
from .roles import router as roles_router

__all__ = [
    "permissions_router",
    "roles_router",
]
