"""neo-rbac administration API application.

FastAPI application exposing the role and permission administration
routes. The permission engine itself is usable without it.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from ..config.settings import RBACSettings, get_settings
from ..database import DatabaseManager
from ..features.permissions.factory import RBACServices, create_asyncpg_services
from .exception_handlers import register_exception_handlers
from .routers import permissions_router, roles_router

logger = logging.getLogger(__name__)


def _database_lifespan(settings: RBACSettings):
    """Lifespan that opens the asyncpg pool and wires the production services."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db_manager = DatabaseManager(settings=settings)
        await db_manager.create_pool()
        app.state.rbac_services = create_asyncpg_services(db_manager)
        logger.info("RBAC services initialized")

        yield

        await db_manager.close_pool()

    return lifespan


def create_app(services: Optional[RBACServices] = None, settings: Optional[RBACSettings] = None) -> FastAPI:
    """Create the administration API.

    Args:
        services: Pre-wired services; when omitted a lifespan builds the
            asyncpg-backed ones from settings
        settings: Settings instance (defaults to get_settings())

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Role and permission administration",
        debug=settings.debug,
        lifespan=None if services is not None else _database_lifespan(settings),
    )
    app.state.settings = settings
    app.state.rbac_services = services

    register_exception_handlers(app, is_production=settings.is_production)

    app.include_router(roles_router, prefix=settings.api_prefix)
    app.include_router(permissions_router, prefix=settings.api_prefix)

    @app.get("/health", tags=["Health"])
    async def health():
        bundle = app.state.rbac_services
        db_manager = bundle.db_manager if bundle else None
        database = "not_configured"
        if db_manager is not None:
            database = "healthy" if await db_manager.health_check() else "unhealthy"
        return {"status": "ok", "database": database}

    logger.info(f"Created {settings.app_name} API")
    return app


def main() -> None:
    """Run the application."""
    settings = get_settings()

    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")

    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
        access_log=True,
    )


if __name__ == "__main__":
    main()
