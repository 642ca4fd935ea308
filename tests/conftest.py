"""Pytest configuration and fixtures for neo-rbac tests.

In-memory implementations of the four collaborator protocols let the
services run without a database.
"""

from contextlib import asynccontextmanager
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Set, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest

from neo_rbac.config.constants import GlobalRole
from neo_rbac.core.exceptions import RoleConflictError, RoleNotFoundError, StoreUnavailableError
from neo_rbac.core.value_objects import ActorId, ResourceId, RoleId, TenantId
from neo_rbac.features.permissions.entities import (
    ActorProfile, Permission, ResourceOverride, Role, validate_override_codes
)
from neo_rbac.features.permissions.factory import create_permission_services
from neo_rbac.features.permissions.registry import get_registry_permissions


class InMemoryPermissionCatalog:
    """PermissionCatalog over a dict keyed by code."""

    def __init__(self, permissions: Iterable[Permission] = ()):
        self.permissions: Dict[str, Permission] = {p.code.value: p for p in permissions}
        self.fail = False

    def _check(self):
        if self.fail:
            raise StoreUnavailableError("catalog offline")

    async def exists(self, code: str) -> bool:
        self._check()
        return code in self.permissions

    async def find_missing(self, codes: Iterable[str]) -> Set[str]:
        self._check()
        return {code for code in codes if code not in self.permissions}

    async def list_all(self) -> List[Permission]:
        self._check()
        return sorted(self.permissions.values(), key=lambda p: (p.module, p.action))

    async def insert_missing(self, permissions: Iterable[Permission]) -> int:
        self._check()
        inserted = 0
        for permission in permissions:
            if permission.code.value not in self.permissions:
                self.permissions[permission.code.value] = permission
                inserted += 1
        return inserted


class InMemoryActorDirectory:
    """ActorDirectory over a dict of profiles."""

    def __init__(self):
        self.profiles: Dict[ActorId, ActorProfile] = {}
        self.lookups = 0
        self.fail = False

    def add_actor(
        self,
        global_role: GlobalRole = GlobalRole.EMPLOYEE,
        role: Optional[Role] = None,
        tenant_id: Optional[TenantId] = None
    ) -> ActorId:
        actor_id = ActorId.generate()
        self.profiles[actor_id] = ActorProfile(
            actor_id=actor_id,
            global_role=global_role,
            role_id=role.id if role else None,
            tenant_id=tenant_id,
        )
        return actor_id

    async def by_id(self, actor_id: ActorId) -> Optional[ActorProfile]:
        self.lookups += 1
        if self.fail:
            raise StoreUnavailableError("directory offline")
        return self.profiles.get(actor_id)


class InMemoryRoleRepository:
    """RoleRepository keeping roles in a dict; members come from the directory."""

    def __init__(self, catalog: InMemoryPermissionCatalog, actors: InMemoryActorDirectory):
        self.catalog = catalog
        self.actors = actors
        self.roles: Dict[RoleId, Role] = {}
        self.permission_lookups = 0
        self.fail = False

    def _check(self):
        if self.fail:
            raise StoreUnavailableError("role store offline")

    def _members(self, role_id: RoleId) -> int:
        return sum(1 for profile in self.actors.profiles.values() if profile.role_id == role_id)

    def _with_count(self, role: Role) -> Role:
        return replace(role, member_count=self._members(role.id))

    def add_role(
        self,
        tenant_id: TenantId,
        name: str,
        codes: Iterable[str] = (),
        is_system: bool = False
    ) -> Role:
        role = Role(
            id=RoleId.generate(),
            tenant_id=tenant_id,
            name=name,
            is_system=is_system,
            permission_codes=frozenset(codes),
        )
        self.roles[role.id] = role
        return role

    async def get_by_id(self, role_id: RoleId) -> Optional[Role]:
        self._check()
        role = self.roles.get(role_id)
        return self._with_count(role) if role else None

    async def get_by_name(self, tenant_id: TenantId, name: str) -> Optional[Role]:
        self._check()
        for role in self.roles.values():
            if role.tenant_id == tenant_id and role.name == name:
                return self._with_count(role)
        return None

    async def list_by_tenant(self, tenant_id: TenantId) -> List[Role]:
        self._check()
        roles = [self._with_count(r) for r in self.roles.values() if r.tenant_id == tenant_id]
        return sorted(roles, key=lambda r: r.name)

    async def get_permission_codes(self, role_id: RoleId) -> Set[str]:
        self.permission_lookups += 1
        self._check()
        role = self.roles.get(role_id)
        return set(role.permission_codes) if role else set()

    async def create(self, role: Role) -> Role:
        self._check()
        for existing in self.roles.values():
            if existing.tenant_id == role.tenant_id and existing.name == role.name:
                raise RoleConflictError(f"Role with name '{role.name}' already exists")
        codes = {code for code in role.permission_codes if code in self.catalog.permissions}
        created = replace(role, id=RoleId.generate(), permission_codes=frozenset(codes), member_count=0)
        self.roles[created.id] = created
        return created

    async def update(self, role: Role) -> Role:
        self._check()
        if role.id not in self.roles:
            raise RoleNotFoundError(f"Role not found: {role.id}")
        current = self.roles[role.id]
        self.roles[role.id] = replace(current, name=role.name, description=role.description)
        return self._with_count(self.roles[role.id])

    async def replace_permissions(self, role_id: RoleId, codes: Set[str]) -> Set[str]:
        self._check()
        if role_id not in self.roles:
            raise RoleNotFoundError(f"Role not found: {role_id}")
        stored = {code for code in codes if code in self.catalog.permissions}
        self.roles[role_id] = self.roles[role_id].with_permissions(stored)
        return stored

    async def count_members(self, role_id: RoleId) -> int:
        self._check()
        return self._members(role_id)

    async def delete(self, role_id: RoleId) -> bool:
        self._check()
        role = self.roles.get(role_id)
        if role is None:
            return False
        if role.is_system:
            raise RoleConflictError("Cannot delete system roles")
        if self._members(role_id):
            raise RoleConflictError("Cannot delete role that is still assigned")
        del self.roles[role_id]
        return True


class InMemoryMembershipStore:
    """ResourceMembershipStore keyed by (resource, actor)."""

    def __init__(self):
        self.overrides: Dict[Tuple[ResourceId, ActorId], ResourceOverride] = {}
        self.lookups = 0
        self.fail = False

    def _check(self):
        if self.fail:
            raise StoreUnavailableError("membership store offline")

    async def membership_of(self, resource_id: ResourceId, actor_id: ActorId) -> Optional[ResourceOverride]:
        self.lookups += 1
        self._check()
        return self.overrides.get((resource_id, actor_id))

    async def grant(self, resource_id: ResourceId, actor_id: ActorId, permissions: Iterable[str]) -> ResourceOverride:
        self._check()
        override = ResourceOverride(resource_id, actor_id, validate_override_codes(permissions))
        self.overrides[(resource_id, actor_id)] = override
        return override

    async def revoke(self, resource_id: ResourceId, actor_id: ActorId) -> bool:
        self._check()
        return self.overrides.pop((resource_id, actor_id), None) is not None

    async def revoke_all(self, resource_id: ResourceId) -> int:
        self._check()
        keys = [key for key in self.overrides if key[0] == resource_id]
        for key in keys:
            del self.overrides[key]
        return len(keys)


@pytest.fixture
def catalog():
    """Catalog seeded with every registry permission."""
    return InMemoryPermissionCatalog(get_registry_permissions())


@pytest.fixture
def actor_directory():
    return InMemoryActorDirectory()


@pytest.fixture
def role_repository(catalog, actor_directory):
    return InMemoryRoleRepository(catalog, actor_directory)


@pytest.fixture
def membership_store():
    return InMemoryMembershipStore()


@pytest.fixture
def services(catalog, role_repository, actor_directory, membership_store):
    """Service bundle wired over the in-memory collaborators."""
    return create_permission_services(
        catalog=catalog,
        role_repository=role_repository,
        actor_directory=actor_directory,
        membership_store=membership_store,
    )


@pytest.fixture
def resolver(services):
    return services.resolver


@pytest.fixture
def tenant_id():
    return TenantId.generate()


@pytest.fixture
def resource_id():
    return ResourceId.generate()


@pytest.fixture
def mock_connection():
    """asyncpg connection double."""
    conn = MagicMock()
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetchval = AsyncMock(return_value=None)
    conn.execute = AsyncMock(return_value="DELETE 0")
    return conn


@pytest.fixture
def mock_db_manager(mock_connection):
    """DatabaseManager double whose acquire/transaction yield the mock connection."""
    manager = MagicMock()
    manager.schema = "public"

    @asynccontextmanager
    async def acquire():
        yield mock_connection

    manager.acquire = acquire
    manager.transaction = acquire
    return manager
