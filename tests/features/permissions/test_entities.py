"""Tests for permission domain entities and identifiers."""

from uuid import uuid4

import pytest

from neo_rbac.config.constants import GlobalRole
from neo_rbac.core.exceptions import InvalidPermissionError, ValidationError
from neo_rbac.core.value_objects import ActorId, ResourceId, RoleId, TenantId
from neo_rbac.features.permissions.entities import (
    AccessDecision, ActorProfile, DecisionSource, EffectivePermissions,
    Permission, PermissionCode, ResourceOverride, Role, code_grants,
    validate_override_codes
)


class TestPermissionCode:

    @pytest.mark.parametrize("value", ["projects.view", "site_logs.edit", "boq.*", "a1.b2"])
    def test_valid_codes(self, value):
        assert PermissionCode(value).value == value

    @pytest.mark.parametrize("value", ["", "projects", "projects.", ".view", "Projects.view", "a.b.c", "*", "projects.*x"])
    def test_invalid_codes(self, value):
        with pytest.raises(InvalidPermissionError):
            PermissionCode(value)
        assert PermissionCode.is_valid(value) is False

    def test_parts(self):
        code = PermissionCode("inventory.approve_bill")

        assert code.module == "inventory"
        assert code.action == "approve_bill"
        assert not code.is_wildcard
        assert PermissionCode("inventory.*").is_wildcard


class TestCodeGrants:

    def test_exact(self):
        assert code_grants("boq.edit", "boq.edit")
        assert not code_grants("boq.edit", "boq.delete")

    def test_wildcard_dot_boundary(self):
        assert code_grants("boq.*", "boq.approve")
        assert not code_grants("boq.*", "boqish.edit")
        assert not code_grants("projects.*", "projectsx.edit")

    def test_bare_star_is_not_a_role_wildcard(self):
        assert not code_grants("*", "boq.edit")


class TestPermission:

    def test_from_code(self):
        permission = Permission.from_code("payroll.config", description="Configure payroll rules")

        assert permission.module == "payroll"
        assert permission.action == "config"
        assert permission.id is None

    def test_mismatched_parts_rejected(self):
        with pytest.raises(InvalidPermissionError):
            Permission(id=None, code=PermissionCode("boq.view"), module="orders", action="view")


class TestRole:

    def test_name_is_stripped(self):
        role = Role(id=RoleId.generate(), tenant_id=TenantId.generate(), name="  Estimator ")

        assert role.name == "Estimator"

    def test_name_length_limit(self):
        with pytest.raises(ValidationError):
            Role(id=None, tenant_id=None, name="x" * 101)

    def test_grants_and_with_permissions(self):
        role = Role(id=None, tenant_id=None, name="Lead", permission_codes={"boq.*"})

        assert role.grants("boq.import")
        assert not role.grants("orders.view")

        narrowed = role.with_permissions(["orders.view"])
        assert narrowed.grants("orders.view")
        assert not narrowed.grants("boq.import")
        assert role.permission_codes == {"boq.*"}


class TestActorProfile:

    def test_global_role_coerced_from_string(self):
        profile = ActorProfile(actor_id=ActorId.generate(), global_role="admin")

        assert profile.global_role is GlobalRole.ADMIN
        assert profile.is_admin
        assert not profile.has_role

    def test_employee_with_role(self):
        profile = ActorProfile(actor_id=ActorId.generate(), role_id=RoleId.generate())

        assert not profile.is_admin
        assert profile.has_role


class TestResourceOverride:

    def test_exact_and_star(self):
        resource, actor = ResourceId.generate(), ActorId.generate()

        assert ResourceOverride(resource, actor, {"tasks.edit"}).grants("tasks.edit")
        assert not ResourceOverride(resource, actor, {"tasks.edit"}).grants("tasks.bulk")
        assert ResourceOverride(resource, actor, {"*"}).grants("tasks.bulk")

    def test_validate_override_codes(self):
        assert validate_override_codes(["*", "tasks.edit"]) == {"*", "tasks.edit"}

        with pytest.raises(InvalidPermissionError):
            validate_override_codes(["tasks.*"])
        with pytest.raises(InvalidPermissionError):
            validate_override_codes(["-tasks.edit"])


class TestDecisions:

    def test_allow_and_deny(self):
        allowed = AccessDecision.allow("boq.edit", DecisionSource.ROLE)
        denied = AccessDecision.deny("boq.edit", DecisionSource.NO_GRANT, "nope")

        assert allowed.allowed and not allowed.denied
        assert denied.denied and denied.reason == "nope"

    def test_effective_permissions_map(self):
        effective = EffectivePermissions(actor_id=ActorId.generate(), permissions=["b.view", "a.view"])

        assert effective.as_map() == {"a.view": True, "b.view": True}


class TestIdentifiers:

    def test_string_coercion_and_equality(self):
        raw = uuid4()

        assert ActorId(str(raw)) == ActorId(raw)
        assert str(TenantId(raw)) == str(raw)

    def test_invalid_uuid(self):
        with pytest.raises(ValueError):
            RoleId("not-a-uuid")
