"""Role administration service.

Creates, edits and deletes tenant roles and their permission sets. Every
write validates codes against the permission catalog first; the atomic
parts (insert with assignments, wholesale replace, guarded delete) live in
the role repository.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Set, Union
from uuid import UUID

from ....config.constants import DefaultRoles
from ....core.exceptions import (
    InvalidPermissionError, RoleConflictError, RoleNotFoundError
)
from ....core.value_objects import RoleId, TenantId
from ..entities import PermissionCatalog, PermissionCode, Role, RoleRepository
from ..registry import DEFAULT_EMPLOYEE_PERMISSIONS


logger = logging.getLogger(__name__)

RoleRef = Union[RoleId, UUID, str]
TenantRef = Union[TenantId, UUID, str]


@dataclass(frozen=True)
class PermissionReplaceResult:
    """Outcome of a wholesale permission replace."""

    role: Role
    permission_codes: FrozenSet[str] = field(default_factory=frozenset)
    warning: Optional[str] = None


def _role_id(value: RoleRef) -> RoleId:
    return value if isinstance(value, RoleId) else RoleId(value)


def _tenant_id(value: TenantRef) -> TenantId:
    return value if isinstance(value, TenantId) else TenantId(value)


def _dedupe(codes: Optional[Iterable[str]]) -> List[str]:
    """Keep first occurrence of each code, preserving input order."""
    seen: Set[str] = set()
    result: List[str] = []
    for code in codes or []:
        if code not in seen:
            seen.add(code)
            result.append(code)
    return result


class RoleAdministrationService:
    """Service for tenant role management."""

    def __init__(self, catalog: PermissionCatalog, role_repository: RoleRepository):
        self.catalog = catalog
        self.role_repository = role_repository

    async def get_role(self, role_id: RoleRef) -> Role:
        """Get a role with its permission codes.

        Raises:
            RoleNotFoundError: If no role has this id
        """
        rid = _role_id(role_id)
        role = await self.role_repository.get_by_id(rid)
        if role is None:
            raise RoleNotFoundError(f"Role not found: {rid}", details={"role_id": str(rid)})
        return role

    async def list_roles(self, tenant_id: TenantRef) -> List[Role]:
        """List a tenant's roles ordered by name, each with its member count."""
        return await self.role_repository.list_by_tenant(_tenant_id(tenant_id))

    async def get_role_permissions(self, role_id: RoleRef) -> Set[str]:
        """Flattened codes of an existing role."""
        role = await self.get_role(role_id)
        return await self.role_repository.get_permission_codes(role.id)

    async def create_role(
        self,
        tenant_id: TenantRef,
        name: str,
        description: Optional[str] = None,
        permission_codes: Optional[Iterable[str]] = None
    ) -> Role:
        """Create a non-system role with its initial permission set.

        Raises:
            ValidationError: If the name is empty or too long
            InvalidPermissionError: If a code is malformed or not in the catalog
            RoleConflictError: If the tenant already has a role with this name
        """
        tid = _tenant_id(tenant_id)
        codes = _dedupe(permission_codes)
        role = Role(id=None, tenant_id=tid, name=name, description=description, permission_codes=frozenset(codes))

        await self._validate_codes(codes)

        existing = await self.role_repository.get_by_name(tid, role.name)
        if existing is not None:
            raise RoleConflictError(
                f"Role with name '{role.name}' already exists",
                details={"tenant_id": str(tid), "name": role.name}
            )

        created = await self.role_repository.create(role)
        logger.info(f"Created role {created.name} ({created.id}) with {len(codes)} permissions")
        return created

    async def update_role(
        self,
        role_id: RoleRef,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> Role:
        """Rename a role or change its description.

        System roles keep their names; seeding and catalog sync find them
        by name.

        Raises:
            RoleNotFoundError: If the role does not exist
            RoleConflictError: If the new name is taken within the tenant,
                or the role is a system role being renamed
        """
        role = await self.get_role(role_id)

        if role.is_system and name is not None and name.strip() != role.name:
            raise RoleConflictError(
                "Cannot rename system roles",
                details={"role_id": str(role.id), "name": role.name}
            )

        new_name = role.name if name is None else name
        new_description = role.description if description is None else description
        updated = Role(
            id=role.id,
            tenant_id=role.tenant_id,
            name=new_name,
            description=new_description,
            is_system=role.is_system,
            permission_codes=role.permission_codes,
            created_at=role.created_at,
        )

        if updated.name != role.name:
            clash = await self.role_repository.get_by_name(role.tenant_id, updated.name)
            if clash is not None and clash.id != role.id:
                raise RoleConflictError(
                    f"Role with name '{updated.name}' already exists",
                    details={"role_id": str(role.id), "name": updated.name}
                )

        result = await self.role_repository.update(updated)
        logger.info(f"Updated role {role.id}: name={result.name!r}")
        return result

    async def replace_role_permissions(
        self,
        role_id: RoleRef,
        permission_codes: Iterable[str]
    ) -> PermissionReplaceResult:
        """Replace a role's permission set wholesale.

        Codes are de-duplicated and validated before anything is written.
        System roles can be edited, but the result carries a warning.

        Raises:
            RoleNotFoundError: If the role does not exist
            InvalidPermissionError: If a code is malformed or not in the catalog
        """
        role = await self.get_role(role_id)
        codes = _dedupe(permission_codes)

        await self._validate_codes(codes)

        stored = await self.role_repository.replace_permissions(role.id, set(codes))

        warning = None
        if role.is_system:
            warning = f"'{role.name}' is a system role; its permissions were modified"
            logger.warning(f"System role {role.name} ({role.id}) permissions replaced with {len(stored)} codes")
        else:
            logger.info(f"Role {role.name} ({role.id}) permissions replaced with {len(stored)} codes")

        return PermissionReplaceResult(
            role=role.with_permissions(stored),
            permission_codes=frozenset(stored),
            warning=warning,
        )

    async def delete_role(self, role_id: RoleRef) -> None:
        """Delete a role that is neither a system role nor assigned to anyone.

        The repository re-checks the member count inside the deleting
        transaction, so an assignment racing this call still aborts it.

        Raises:
            RoleNotFoundError: If the role does not exist
            RoleConflictError: If the role is a system role or still assigned
        """
        role = await self.get_role(role_id)

        if role.is_system:
            raise RoleConflictError(
                "Cannot delete system roles",
                details={"role_id": str(role.id), "name": role.name}
            )

        members = await self.role_repository.count_members(role.id)
        if members > 0:
            raise RoleConflictError(
                f"Cannot delete role. {members} user(s) are assigned to this role.",
                details={"role_id": str(role.id), "member_count": members}
            )

        deleted = await self.role_repository.delete(role.id)
        if not deleted:
            raise RoleNotFoundError(f"Role not found: {role.id}", details={"role_id": str(role.id)})

        logger.info(f"Deleted role {role.name} ({role.id})")

    async def seed_default_roles(self, tenant_id: TenantRef, all_codes: Optional[Iterable[str]] = None) -> List[Role]:
        """Create the Admin and Employee system roles when absent.

        Args:
            tenant_id: Tenant to seed
            all_codes: Codes for the Admin role; defaults to the whole catalog

        Returns:
            Roles created by this call (empty if both already existed)
        """
        tid = _tenant_id(tenant_id)
        if all_codes is None:
            all_codes = [permission.code.value for permission in await self.catalog.list_all()]

        missing_employee = await self.catalog.find_missing(DEFAULT_EMPLOYEE_PERMISSIONS)
        employee_codes = [code for code in DEFAULT_EMPLOYEE_PERMISSIONS if code not in missing_employee]

        defaults = [
            (DefaultRoles.ADMIN, DefaultRoles.ADMIN_DESCRIPTION, _dedupe(all_codes)),
            (DefaultRoles.EMPLOYEE, DefaultRoles.EMPLOYEE_DESCRIPTION, employee_codes),
        ]

        created: List[Role] = []
        for name, description, codes in defaults:
            if await self.role_repository.get_by_name(tid, name) is not None:
                continue
            role = Role(
                id=None,
                tenant_id=tid,
                name=name,
                description=description,
                is_system=True,
                permission_codes=frozenset(codes),
            )
            created.append(await self.role_repository.create(role))
            logger.info(f"Seeded system role {name} for tenant {tid} with {len(codes)} permissions")

        return created

    async def _validate_codes(self, codes: List[str]) -> None:
        malformed = [code for code in codes if not PermissionCode.is_valid(code)]
        if malformed:
            raise InvalidPermissionError(
                f"Malformed permission codes: {', '.join(sorted(malformed))}",
                details={"invalid_codes": sorted(malformed)}
            )

        if not codes:
            return

        missing = await self.catalog.find_missing(codes)
        if missing:
            raise InvalidPermissionError(
                f"Unknown permission codes: {', '.join(sorted(missing))}",
                details={"invalid_codes": sorted(missing)}
            )
