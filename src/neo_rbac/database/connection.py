"""
Database connection management using asyncpg for neo-rbac.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import asyncpg
from asyncpg import Pool

from ..config.settings import RBACSettings, get_settings

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages the asyncpg pool shared by the RBAC repositories."""
    
    def __init__(self, database_url: Optional[str] = None, settings: Optional[RBACSettings] = None, **pool_config):
        """Initialize DatabaseManager.
        
        Args:
            database_url: Database URL (defaults to settings.database_url)
            settings: Settings instance (defaults to get_settings())
            **pool_config: Additional pool configuration options
        """
        self.settings = settings or get_settings()
        self.pool: Optional[Pool] = None
        self.dsn = database_url or self.settings.database_url
        if "+asyncpg" in self.dsn:
            self.dsn = self.dsn.replace("+asyncpg", "")
        
        self.pool_config = {
            "min_size": self.settings.db_pool_min_size,
            "max_size": self.settings.db_pool_max_size,
            "max_inactive_connection_lifetime": 300,
            "command_timeout": self.settings.db_command_timeout,
            **pool_config
        }
    
    @property
    def schema(self) -> str:
        return self.settings.db_schema
    
    async def create_pool(self) -> Pool:
        """Create and return a connection pool."""
        if self.pool is None:
            logger.info(f"Creating database pool with size {self.pool_config['max_size']}")
            
            server_settings = {
                'application_name': self.settings.app_name,
            }
            
            self.pool = await asyncpg.create_pool(
                self.dsn,
                server_settings=server_settings,
                **self.pool_config
            )
            logger.info("Database pool created successfully")
        return self.pool
    
    async def close_pool(self):
        """Close the connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Database pool closed")
    
    @asynccontextmanager
    async def acquire(self):
        """Acquire a connection from the pool."""
        if not self.pool:
            await self.create_pool()
        
        async with self.pool.acquire() as connection:
            yield connection
    
    @asynccontextmanager
    async def transaction(self):
        """Create a transaction context."""
        async with self.acquire() as connection:
            async with connection.transaction():
                yield connection
    
    async def health_check(self) -> bool:
        """Check database health."""
        try:
            async with self.acquire() as connection:
                result = await connection.fetchval("SELECT 1")
                return result == 1
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False
