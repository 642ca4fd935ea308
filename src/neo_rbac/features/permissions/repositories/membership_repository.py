"""AsyncPG-based resource membership store.

Per-resource overrides live in ``project_members.permissions`` as a text
array. Only the resource-owning subsystem writes them.
"""

from typing import Iterable, Optional
import logging

from ....config.constants import DatabaseTables
from ....core.exceptions import NeoRBACError, StoreUnavailableError
from ....core.value_objects import ActorId, ResourceId
from ..entities import ResourceOverride, validate_override_codes


logger = logging.getLogger(__name__)


def _affected_rows(status: str) -> int:
    """Row count from an asyncpg command status such as ``DELETE 3``."""
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0


class AsyncPGResourceMembershipStore:
    """AsyncPG implementation of ResourceMembershipStore protocol."""

    def __init__(self, db_manager):
        self.db = db_manager

    @property
    def _table(self) -> str:
        return f"{self.db.schema}.{DatabaseTables.RESOURCE_MEMBERS}"

    async def membership_of(self, resource_id: ResourceId, actor_id: ActorId) -> Optional[ResourceOverride]:
        """Get the actor's override on a resource, if they are a member."""
        try:
            async with self.db.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT permissions FROM {self._table} WHERE project_id = $1 AND user_id = $2",
                    resource_id.value, actor_id.value
                )
        except Exception as e:
            logger.error(f"Failed to load membership of {actor_id} on {resource_id}: {e}")
            raise StoreUnavailableError(f"Failed to load resource membership: {e}")

        if row is None:
            return None
        return ResourceOverride(resource_id, actor_id, frozenset(row['permissions'] or []))

    async def grant(self, resource_id: ResourceId, actor_id: ActorId, permissions: Iterable[str]) -> ResourceOverride:
        """Create or replace the actor's override on a resource."""
        codes = validate_override_codes(permissions)
        try:
            async with self.db.acquire() as conn:
                await conn.execute(
                    f"""
                    INSERT INTO {self._table} (project_id, user_id, permissions)
                    VALUES ($1, $2, $3::text[])
                    ON CONFLICT (project_id, user_id)
                    DO UPDATE SET permissions = EXCLUDED.permissions
                    """,
                    resource_id.value, actor_id.value, sorted(codes)
                )
        except NeoRBACError:
            raise
        except Exception as e:
            logger.error(f"Failed to grant override to {actor_id} on {resource_id}: {e}")
            raise StoreUnavailableError(f"Failed to grant resource override: {e}")

        logger.info(f"Granted {len(codes)} override permissions to {actor_id} on resource {resource_id}")
        return ResourceOverride(resource_id, actor_id, codes)

    async def revoke(self, resource_id: ResourceId, actor_id: ActorId) -> bool:
        """Remove the actor's membership on a resource."""
        try:
            async with self.db.acquire() as conn:
                status = await conn.execute(
                    f"DELETE FROM {self._table} WHERE project_id = $1 AND user_id = $2",
                    resource_id.value, actor_id.value
                )
        except Exception as e:
            logger.error(f"Failed to revoke override of {actor_id} on {resource_id}: {e}")
            raise StoreUnavailableError(f"Failed to revoke resource override: {e}")

        return _affected_rows(status) > 0

    async def revoke_all(self, resource_id: ResourceId) -> int:
        """Remove every membership on a deleted resource."""
        try:
            async with self.db.acquire() as conn:
                status = await conn.execute(
                    f"DELETE FROM {self._table} WHERE project_id = $1",
                    resource_id.value
                )
        except Exception as e:
            logger.error(f"Failed to revoke overrides on {resource_id}: {e}")
            raise StoreUnavailableError(f"Failed to revoke resource overrides: {e}")

        removed = _affected_rows(status)
        if removed:
            logger.info(f"Removed {removed} override(s) from resource {resource_id}")
        return removed
