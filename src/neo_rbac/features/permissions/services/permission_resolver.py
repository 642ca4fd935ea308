"""Permission resolution service.

Answers "may actor A perform P, optionally on resource R?" by walking a
fixed pipeline: actor lookup, admin bypass, role codes (exact or module
wildcard), resource override, deny. Nothing is cached between calls, so a
role edit is visible to the very next check.
"""

import logging
from typing import Iterable, Optional, Set, Union
from uuid import UUID

from ....config.constants import DenialReasons
from ....core.exceptions import InvalidPermissionError, PermissionDeniedError
from ....core.value_objects import ActorId, ResourceId
from ..entities import (
    AccessDecision, ActorDirectory, DecisionSource, EffectivePermissions,
    PermissionCode, ResourceMembershipStore, RoleRepository, code_grants
)


logger = logging.getLogger(__name__)

ActorRef = Union[ActorId, UUID, str]
ResourceRef = Union[ResourceId, UUID, str, None]


def _actor_id(value: ActorRef) -> Optional[ActorId]:
    """Parse an actor reference; None when it cannot name any actor."""
    if isinstance(value, ActorId):
        return value
    try:
        return ActorId(value)
    except ValueError:
        logger.info(f"Unresolvable actor id {value!r}")
        return None


def _resource_id(value: ResourceRef) -> Optional[ResourceId]:
    """Parse a resource reference; an unparseable one scopes nothing."""
    if value is None or isinstance(value, ResourceId):
        return value
    try:
        return ResourceId(value)
    except ValueError:
        logger.info(f"Ignoring unparseable resource id {value!r}")
        return None


class PermissionResolver:
    """Stateless resolver over the actor, role and membership collaborators."""

    def __init__(
        self,
        actor_directory: ActorDirectory,
        role_repository: RoleRepository,
        membership_store: ResourceMembershipStore
    ):
        self.actor_directory = actor_directory
        self.role_repository = role_repository
        self.membership_store = membership_store

    async def check(
        self,
        actor_id: ActorRef,
        permission_code: str,
        resource_id: ResourceRef = None
    ) -> AccessDecision:
        """Decide whether the actor holds ``permission_code``.

        Args:
            actor_id: Authenticated actor
            permission_code: Concrete ``module.action`` code
            resource_id: Optional resource scoping the check

        Returns:
            AccessDecision; collaborator failures yield a denial

        Raises:
            InvalidPermissionError: If the code is malformed or a wildcard
        """
        required = self._validate_required(permission_code)
        actor = _actor_id(actor_id)
        resource = _resource_id(resource_id)

        if actor is None:
            return AccessDecision.deny(
                required, DecisionSource.ACTOR_NOT_FOUND, DenialReasons.ACTOR_NOT_FOUND,
                resource_id=resource
            )

        try:
            return await self._resolve(actor, required, resource)
        except Exception as e:
            logger.error(
                f"Permission check failed for actor {actor} on {required} "
                f"(resource={resource}): {e}"
            )
            return AccessDecision.deny(
                required, DecisionSource.STORE_UNAVAILABLE, DenialReasons.CHECK_FAILED,
                actor_id=actor, resource_id=resource
            )

    async def any_of(
        self,
        actor_id: ActorRef,
        permission_codes: Iterable[str],
        resource_id: ResourceRef = None
    ) -> bool:
        """True on the first code that resolves to allowed; False for an empty list."""
        for code in permission_codes:
            decision = await self.check(actor_id, code, resource_id)
            if decision.allowed:
                return True
        return False

    async def all_of(
        self,
        actor_id: ActorRef,
        permission_codes: Iterable[str],
        resource_id: ResourceRef = None
    ) -> bool:
        """False on the first denied code; True for an empty list."""
        for code in permission_codes:
            decision = await self.check(actor_id, code, resource_id)
            if decision.denied:
                return False
        return True

    async def verify(
        self,
        actor_id: ActorRef,
        permission_code: str,
        resource_id: ResourceRef = None
    ) -> AccessDecision:
        """Like :meth:`check` but raises PermissionDeniedError on denial.

        The raised message is the generic client-facing one; the internal
        reason only reaches the log.
        """
        decision = await self.check(actor_id, permission_code, resource_id)
        if decision.denied:
            raise PermissionDeniedError(
                DenialReasons.PUBLIC_MESSAGE.format(code=decision.permission_code),
                details={"permission": decision.permission_code}
            )
        return decision

    async def is_admin(self, actor_id: ActorRef) -> bool:
        """Check the global admin flag; False when the actor or store is unavailable."""
        actor = _actor_id(actor_id)
        if actor is None:
            return False
        try:
            profile = await self.actor_directory.by_id(actor)
        except Exception as e:
            logger.error(f"Admin lookup failed for actor {actor}: {e}")
            return False
        return profile is not None and profile.is_admin

    async def get_effective_permissions(
        self,
        actor_id: ActorRef,
        resource_id: ResourceRef = None
    ) -> EffectivePermissions:
        """Collect the codes an actor currently holds.

        Administrators get the single ``*`` entry. Store errors propagate so
        callers can distinguish "nothing granted" from "could not tell".
        """
        actor = _actor_id(actor_id)
        resource = _resource_id(resource_id)

        profile = await self.actor_directory.by_id(actor) if actor is not None else None
        if profile is None:
            return EffectivePermissions(actor_id=actor)

        if profile.is_admin:
            return EffectivePermissions(actor_id=actor, is_admin=True, permissions=frozenset({"*"}))

        codes: Set[str] = set()
        if profile.role_id is not None:
            codes |= await self.role_repository.get_permission_codes(profile.role_id)

        if resource is not None:
            override = await self.membership_store.membership_of(resource, actor)
            if override is not None:
                codes |= override.permissions

        return EffectivePermissions(actor_id=actor, permissions=frozenset(codes))

    async def _resolve(
        self,
        actor: ActorId,
        required: str,
        resource: Optional[ResourceId]
    ) -> AccessDecision:
        profile = await self.actor_directory.by_id(actor)
        if profile is None:
            logger.info(f"Denied {required} for unknown actor {actor}")
            return AccessDecision.deny(
                required, DecisionSource.ACTOR_NOT_FOUND, DenialReasons.ACTOR_NOT_FOUND,
                actor_id=actor, resource_id=resource
            )

        if profile.is_admin:
            return AccessDecision.allow(
                required, DecisionSource.ADMIN_BYPASS, actor_id=actor, resource_id=resource
            )

        # A role miss falls through to the override step
        if profile.role_id is not None:
            role_codes = await self.role_repository.get_permission_codes(profile.role_id)
            if any(code_grants(code, required) for code in role_codes):
                return AccessDecision.allow(
                    required, DecisionSource.ROLE, actor_id=actor, resource_id=resource
                )

        if resource is not None:
            override = await self.membership_store.membership_of(resource, actor)
            if override is not None and override.grants(required):
                return AccessDecision.allow(
                    required, DecisionSource.RESOURCE_OVERRIDE, actor_id=actor, resource_id=resource
                )

        reason = DenialReasons.PERMISSION_REQUIRED.format(code=required)
        logger.info(f"Denied actor {actor}: {reason} (resource={resource})")
        return AccessDecision.deny(
            required, DecisionSource.NO_GRANT, reason, actor_id=actor, resource_id=resource
        )

    @staticmethod
    def _validate_required(permission_code: str) -> str:
        code = PermissionCode(permission_code)
        if code.is_wildcard:
            raise InvalidPermissionError(
                f"Required permission must be a concrete code, got wildcard: {permission_code}",
                details={"code": permission_code}
            )
        return code.value
