"""AsyncPG-based permission catalog repository.

Concrete implementation of the PermissionCatalog protocol over the
``permissions`` table.
"""

from typing import Iterable, List, Set
import asyncpg
import logging

from ....config.constants import DatabaseTables
from ....core.exceptions import NeoRBACError, StoreUnavailableError
from ..entities import Permission


logger = logging.getLogger(__name__)


class AsyncPGPermissionRepository:
    """AsyncPG implementation of PermissionCatalog protocol."""

    def __init__(self, db_manager):
        """Initialize with the shared DatabaseManager."""
        self.db = db_manager

    @property
    def _table(self) -> str:
        return f"{self.db.schema}.{DatabaseTables.PERMISSIONS}"

    def _build_permission_from_row(self, row: asyncpg.Record) -> Permission:
        """Build Permission entity from database row."""
        permission = Permission.from_code(row['code'], description=row['description'], id=row['id'])
        permission.created_at = row['created_at']
        return permission

    async def exists(self, code: str) -> bool:
        """Check if a code is present in the catalog."""
        try:
            async with self.db.acquire() as conn:
                query = f"SELECT EXISTS(SELECT 1 FROM {self._table} WHERE code = $1)"
                return bool(await conn.fetchval(query, code))
        except Exception as e:
            logger.error(f"Failed to check permission {code}: {e}")
            raise StoreUnavailableError(f"Failed to check permission: {e}")

    async def find_missing(self, codes: Iterable[str]) -> Set[str]:
        """Return the requested codes absent from the catalog."""
        wanted = set(codes)
        if not wanted:
            return set()

        try:
            async with self.db.acquire() as conn:
                query = f"SELECT code FROM {self._table} WHERE code = ANY($1::text[])"
                rows = await conn.fetch(query, list(wanted))
        except Exception as e:
            logger.error(f"Failed to look up permission codes: {e}")
            raise StoreUnavailableError(f"Failed to look up permissions: {e}")

        return wanted - {row['code'] for row in rows}

    async def list_all(self) -> List[Permission]:
        """List all permissions ordered by module, then action."""
        try:
            async with self.db.acquire() as conn:
                query = f"""
                    SELECT id, code, module, action, description, created_at
                    FROM {self._table}
                    ORDER BY module, action
                """
                rows = await conn.fetch(query)
        except Exception as e:
            logger.error(f"Failed to list permissions: {e}")
            raise StoreUnavailableError(f"Failed to list permissions: {e}")

        return [self._build_permission_from_row(row) for row in rows]

    async def insert_missing(self, permissions: Iterable[Permission]) -> int:
        """Insert permissions whose code is not stored yet.

        Returns:
            Number of rows actually inserted
        """
        inserted = 0
        try:
            async with self.db.transaction() as conn:
                query = f"""
                    INSERT INTO {self._table} (code, module, action, description)
                    VALUES ($1, $2, $3, $4)
                    ON CONFLICT (code) DO NOTHING
                    RETURNING id
                """
                for permission in permissions:
                    new_id = await conn.fetchval(
                        query,
                        permission.code.value,
                        permission.module,
                        permission.action,
                        permission.description,
                    )
                    if new_id is not None:
                        inserted += 1
        except NeoRBACError:
            raise
        except Exception as e:
            logger.error(f"Failed to insert permissions: {e}")
            raise StoreUnavailableError(f"Failed to insert permissions: {e}")

        return inserted
