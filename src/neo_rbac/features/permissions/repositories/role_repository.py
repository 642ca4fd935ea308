"""AsyncPG-based role repository implementation.

Concrete implementation of the RoleRepository protocol over the ``roles``
and ``role_permissions`` tables. Multi-statement writes run inside a single
transaction.
"""

from typing import List, Optional, Set
import asyncpg
import logging

from ....config.constants import DatabaseTables
from ....core.exceptions import (
    NeoRBACError, RoleConflictError, RoleNotFoundError, StoreUnavailableError
)
from ....core.value_objects import RoleId, TenantId
from ..entities import Role


logger = logging.getLogger(__name__)


class AsyncPGRoleRepository:
    """AsyncPG implementation of RoleRepository protocol."""

    def __init__(self, db_manager):
        """Initialize with the shared DatabaseManager."""
        self.db = db_manager

    def _t(self, table: str) -> str:
        return f"{self.db.schema}.{table}"

    def _role_select(self) -> str:
        """Role columns plus flattened codes and member count."""
        roles = self._t(DatabaseTables.ROLES)
        role_permissions = self._t(DatabaseTables.ROLE_PERMISSIONS)
        permissions = self._t(DatabaseTables.PERMISSIONS)
        users = self._t(DatabaseTables.USERS)
        return f"""
            SELECT r.id, r.tenant_id, r.name, r.description, r.is_system,
                   r.created_at, r.updated_at,
                   COALESCE((
                       SELECT array_agg(p.code ORDER BY p.code)
                       FROM {role_permissions} rp
                       JOIN {permissions} p ON p.id = rp.permission_id
                       WHERE rp.role_id = r.id
                   ), '{{}}'::text[]) AS permission_codes,
                   (SELECT COUNT(*) FROM {users} u WHERE u.role_id = r.id) AS member_count
            FROM {roles} r
        """

    def _build_role_from_row(self, row: asyncpg.Record) -> Role:
        """Build Role entity from database row."""
        return Role(
            id=RoleId(row['id']),
            tenant_id=TenantId(row['tenant_id']) if row['tenant_id'] else None,
            name=row['name'],
            description=row['description'],
            is_system=row['is_system'],
            permission_codes=frozenset(row['permission_codes'] or []),
            member_count=row['member_count'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    def _store_error(self, action: str, e: Exception) -> StoreUnavailableError:
        logger.error(f"Failed to {action}: {e}")
        return StoreUnavailableError(f"Failed to {action}: {e}")

    async def get_by_id(self, role_id: RoleId) -> Optional[Role]:
        """Get role by ID with its permission codes."""
        try:
            async with self.db.acquire() as conn:
                row = await conn.fetchrow(f"{self._role_select()} WHERE r.id = $1", role_id.value)
        except Exception as e:
            raise self._store_error(f"get role {role_id}", e)

        return self._build_role_from_row(row) if row else None

    async def get_by_name(self, tenant_id: TenantId, name: str) -> Optional[Role]:
        """Get a tenant's role by name."""
        try:
            async with self.db.acquire() as conn:
                row = await conn.fetchrow(
                    f"{self._role_select()} WHERE r.tenant_id = $1 AND r.name = $2",
                    tenant_id.value, name
                )
        except Exception as e:
            raise self._store_error(f"get role {name!r} for tenant {tenant_id}", e)

        return self._build_role_from_row(row) if row else None

    async def list_by_tenant(self, tenant_id: TenantId) -> List[Role]:
        """List a tenant's roles ordered by name."""
        try:
            async with self.db.acquire() as conn:
                rows = await conn.fetch(
                    f"{self._role_select()} WHERE r.tenant_id = $1 ORDER BY r.name",
                    tenant_id.value
                )
        except Exception as e:
            raise self._store_error(f"list roles for tenant {tenant_id}", e)

        return [self._build_role_from_row(row) for row in rows]

    async def _codes_for(self, conn: asyncpg.Connection, role_id: RoleId) -> Set[str]:
        rows = await conn.fetch(
            f"""
            SELECT p.code
            FROM {self._t(DatabaseTables.ROLE_PERMISSIONS)} rp
            JOIN {self._t(DatabaseTables.PERMISSIONS)} p ON p.id = rp.permission_id
            WHERE rp.role_id = $1
            """,
            role_id.value
        )
        return {row['code'] for row in rows}

    async def get_permission_codes(self, role_id: RoleId) -> Set[str]:
        """Flatten a role's assignments into codes."""
        try:
            async with self.db.acquire() as conn:
                return await self._codes_for(conn, role_id)
        except Exception as e:
            raise self._store_error(f"get permissions for role {role_id}", e)

    async def _assign_codes(self, conn: asyncpg.Connection, role_id: RoleId, codes: Set[str]) -> None:
        if not codes:
            return
        await conn.execute(
            f"""
            INSERT INTO {self._t(DatabaseTables.ROLE_PERMISSIONS)} (role_id, permission_id)
            SELECT $1, id FROM {self._t(DatabaseTables.PERMISSIONS)}
            WHERE code = ANY($2::text[])
            ON CONFLICT (role_id, permission_id) DO NOTHING
            """,
            role_id.value, sorted(codes)
        )

    async def create(self, role: Role) -> Role:
        """Insert a role and its assignments in one transaction."""
        try:
            async with self.db.transaction() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO {self._t(DatabaseTables.ROLES)} (tenant_id, name, description, is_system)
                    VALUES ($1, $2, $3, $4)
                    RETURNING id, created_at, updated_at
                    """,
                    role.tenant_id.value if role.tenant_id else None,
                    role.name,
                    role.description,
                    role.is_system,
                )
                role_id = RoleId(row['id'])
                await self._assign_codes(conn, role_id, set(role.permission_codes))
        except asyncpg.UniqueViolationError:
            raise RoleConflictError(
                f"Role with name '{role.name}' already exists",
                details={"name": role.name}
            )
        except NeoRBACError:
            raise
        except Exception as e:
            raise self._store_error(f"create role {role.name!r}", e)

        return Role(
            id=role_id,
            tenant_id=role.tenant_id,
            name=role.name,
            description=role.description,
            is_system=role.is_system,
            permission_codes=role.permission_codes,
            member_count=0,
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    async def update(self, role: Role) -> Role:
        """Update name and description."""
        try:
            async with self.db.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE {self._t(DatabaseTables.ROLES)}
                    SET name = $2, description = $3, updated_at = NOW()
                    WHERE id = $1
                    RETURNING id
                    """,
                    role.id.value, role.name, role.description
                )
        except asyncpg.UniqueViolationError:
            raise RoleConflictError(
                f"Role with name '{role.name}' already exists",
                details={"role_id": str(role.id), "name": role.name}
            )
        except Exception as e:
            raise self._store_error(f"update role {role.id}", e)

        if row is None:
            raise RoleNotFoundError(f"Role not found: {role.id}", details={"role_id": str(role.id)})

        updated = await self.get_by_id(role.id)
        if updated is None:
            raise RoleNotFoundError(f"Role not found: {role.id}", details={"role_id": str(role.id)})
        return updated

    async def replace_permissions(self, role_id: RoleId, codes: Set[str]) -> Set[str]:
        """Clear and re-insert a role's assignments atomically.

        Returns the codes actually stored; a code missing from the catalog
        at insert time is not among them.
        """
        try:
            async with self.db.transaction() as conn:
                locked = await conn.fetchval(
                    f"SELECT id FROM {self._t(DatabaseTables.ROLES)} WHERE id = $1 FOR UPDATE",
                    role_id.value
                )
                if locked is None:
                    raise RoleNotFoundError(f"Role not found: {role_id}", details={"role_id": str(role_id)})

                await conn.execute(
                    f"DELETE FROM {self._t(DatabaseTables.ROLE_PERMISSIONS)} WHERE role_id = $1",
                    role_id.value
                )
                await self._assign_codes(conn, role_id, set(codes))
                await conn.execute(
                    f"UPDATE {self._t(DatabaseTables.ROLES)} SET updated_at = NOW() WHERE id = $1",
                    role_id.value
                )
                stored = await self._codes_for(conn, role_id)
        except NeoRBACError:
            raise
        except Exception as e:
            raise self._store_error(f"replace permissions for role {role_id}", e)

        return stored

    async def count_members(self, role_id: RoleId) -> int:
        """Count users assigned to the role."""
        try:
            async with self.db.acquire() as conn:
                count = await conn.fetchval(
                    f"SELECT COUNT(*) FROM {self._t(DatabaseTables.USERS)} WHERE role_id = $1",
                    role_id.value
                )
        except Exception as e:
            raise self._store_error(f"count members of role {role_id}", e)

        return int(count or 0)

    async def delete(self, role_id: RoleId) -> bool:
        """Delete an unreferenced, non-system role.

        The role row is locked first; assigning the role to a user needs a
        key-share lock on that row, so no assignment can land between the
        count and the delete.
        """
        try:
            async with self.db.transaction() as conn:
                row = await conn.fetchrow(
                    f"SELECT id, is_system FROM {self._t(DatabaseTables.ROLES)} WHERE id = $1 FOR UPDATE",
                    role_id.value
                )
                if row is None:
                    return False
                if row['is_system']:
                    raise RoleConflictError(
                        "Cannot delete system roles",
                        details={"role_id": str(role_id)}
                    )

                members = await conn.fetchval(
                    f"SELECT COUNT(*) FROM {self._t(DatabaseTables.USERS)} WHERE role_id = $1",
                    role_id.value
                )
                if members:
                    raise RoleConflictError(
                        f"Cannot delete role. {members} user(s) are assigned to this role.",
                        details={"role_id": str(role_id), "member_count": members}
                    )

                await conn.execute(
                    f"DELETE FROM {self._t(DatabaseTables.ROLE_PERMISSIONS)} WHERE role_id = $1",
                    role_id.value
                )
                await conn.execute(
                    f"DELETE FROM {self._t(DatabaseTables.ROLES)} WHERE id = $1",
                    role_id.value
                )
        except NeoRBACError:
            raise
        except asyncpg.ForeignKeyViolationError:
            raise RoleConflictError(
                "Cannot delete role that is still referenced",
                details={"role_id": str(role_id)}
            )
        except Exception as e:
            raise self._store_error(f"delete role {role_id}", e)

        return True
