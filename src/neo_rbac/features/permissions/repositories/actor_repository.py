"""AsyncPG-based actor directory over the ``users`` table."""

from typing import Optional
import logging

from ....config.constants import DatabaseTables, GlobalRole
from ....core.exceptions import StoreUnavailableError
from ....core.value_objects import ActorId, RoleId, TenantId
from ..entities import ActorProfile


logger = logging.getLogger(__name__)


class AsyncPGActorDirectory:
    """AsyncPG implementation of ActorDirectory protocol."""

    def __init__(self, db_manager):
        self.db = db_manager

    async def by_id(self, actor_id: ActorId) -> Optional[ActorProfile]:
        """Load the actor's global role and assigned role."""
        try:
            async with self.db.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT id, tenant_id, role, role_id
                    FROM {self.db.schema}.{DatabaseTables.USERS}
                    WHERE id = $1
                    """,
                    actor_id.value
                )
        except Exception as e:
            logger.error(f"Failed to load actor {actor_id}: {e}")
            raise StoreUnavailableError(f"Failed to load actor: {e}")

        if row is None:
            return None

        # Anything other than the admin flag is an ordinary employee
        global_role = GlobalRole.ADMIN if row['role'] == GlobalRole.ADMIN.value else GlobalRole.EMPLOYEE

        return ActorProfile(
            actor_id=actor_id,
            global_role=global_role,
            role_id=RoleId(row['role_id']) if row['role_id'] else None,
            tenant_id=TenantId(row['tenant_id']) if row['tenant_id'] else None,
        )
