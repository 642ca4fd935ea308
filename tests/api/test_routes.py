"""Tests for the administration HTTP surface and the permission dependency."""

from uuid import uuid4

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from neo_rbac.api import RequirePermission, create_app
from neo_rbac.config.constants import DefaultRoles, GlobalRole
from neo_rbac.config.settings import RBACSettings
from neo_rbac.core.value_objects import ActorId
from neo_rbac.features.permissions.entities import ResourceOverride

PREFIX = "/api/v1"


@pytest.fixture
def settings():
    return RBACSettings(environment="test", actor_header="X-Actor-Id", default_tenant_id=None)


@pytest.fixture
def app(services, settings):
    app = create_app(services=services, settings=settings)

    @app.get("/projects/{project_id}/boq")
    async def read_boq(project_id: str, actor: ActorId = Depends(RequirePermission("boq.view", resource_param="project_id"))):
        return {"actor": str(actor), "project": project_id}

    @app.get("/reports")
    async def reports(actor: ActorId = Depends(RequirePermission(["finance.view", "payments.view"], any_of=True))):
        return {"ok": True}

    @app.get("/ledger")
    async def ledger(actor: ActorId = Depends(RequirePermission(["finance.view", "payments.view"]))):
        return {"ok": True}

    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin(actor_directory):
    return actor_directory.add_actor(global_role=GlobalRole.ADMIN)


def headers(actor_id):
    return {"X-Actor-Id": str(actor_id)}


class TestIdentity:

    def test_missing_actor_header(self, client):
        response = client.get(f"{PREFIX}/permissions")

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_malformed_actor_header(self, client):
        response = client.get(f"{PREFIX}/permissions", headers={"X-Actor-Id": "nope"})

        assert response.status_code == 401

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "database": "not_configured"}


class TestPermissionRoutes:

    def test_list_catalog(self, client, admin):
        response = client.get(f"{PREFIX}/permissions", headers=headers(admin))

        assert response.status_code == 200
        data = response.json()["data"]
        assert "projects" in data["grouped"]
        assert any(p["code"] == "boq.*" for p in data["permissions"])

    def test_sync_requires_admin(self, client, actor_directory):
        employee = actor_directory.add_actor()

        response = client.post(f"{PREFIX}/permissions/sync", headers=headers(employee))

        assert response.status_code == 403

    def test_sync_as_admin(self, client, admin):
        response = client.post(f"{PREFIX}/permissions/sync", headers=headers(admin))

        assert response.status_code == 200
        assert response.json()["data"]["inserted"] == 0

    def test_my_permissions_admin(self, client, admin):
        response = client.get(f"{PREFIX}/me/permissions", headers=headers(admin))

        assert response.json()["data"]["permissions"] == {"*": True}
        assert response.json()["data"]["is_admin"] is True

    def test_my_permissions_with_resource(self, client, actor_directory, role_repository, membership_store, tenant_id, resource_id):
        role = role_repository.add_role(tenant_id, "Viewer", ["projects.view"])
        actor = actor_directory.add_actor(role=role)
        membership_store.overrides[(resource_id, actor)] = ResourceOverride(resource_id, actor, {"snags.create"})

        response = client.get(
            f"{PREFIX}/me/permissions",
            params={"resource_id": str(resource_id)},
            headers=headers(actor)
        )

        assert response.json()["data"]["permissions"] == {"projects.view": True, "snags.create": True}


class TestRoleRoutes:

    def test_create_role(self, client, admin, tenant_id):
        response = client.post(
            f"{PREFIX}/roles",
            json={"tenant_id": str(tenant_id), "name": "Estimator", "permissions": ["boq.view", "boq.edit"]},
            headers=headers(admin)
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Estimator"
        assert data["permissions"] == ["boq.edit", "boq.view"]

    def test_create_role_requires_admin(self, client, actor_directory, tenant_id):
        employee = actor_directory.add_actor()

        response = client.post(
            f"{PREFIX}/roles",
            json={"tenant_id": str(tenant_id), "name": "Estimator"},
            headers=headers(employee)
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Only admins can manage roles and permissions"

    def test_create_duplicate_conflicts(self, client, admin, role_repository, tenant_id):
        role_repository.add_role(tenant_id, "Estimator")

        response = client.post(
            f"{PREFIX}/roles",
            json={"tenant_id": str(tenant_id), "name": "Estimator"},
            headers=headers(admin)
        )

        assert response.status_code == 409

    def test_create_with_unknown_code(self, client, admin, tenant_id):
        response = client.post(
            f"{PREFIX}/roles",
            json={"tenant_id": str(tenant_id), "name": "Bad", "permissions": ["boq.fly"]},
            headers=headers(admin)
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["details"]["invalid_codes"] == ["boq.fly"]

    def test_list_roles(self, client, admin, role_repository, tenant_id):
        role_repository.add_role(tenant_id, "Zeta")
        role_repository.add_role(tenant_id, "Alpha")

        response = client.get(f"{PREFIX}/roles", params={"tenant_id": str(tenant_id)}, headers=headers(admin))

        assert [r["name"] for r in response.json()["data"]] == ["Alpha", "Zeta"]

    def test_list_roles_without_tenant(self, client, admin):
        response = client.get(f"{PREFIX}/roles", headers=headers(admin))

        assert response.status_code == 400

    def test_get_unknown_role(self, client, admin):
        response = client.get(f"{PREFIX}/roles/{uuid4()}", headers=headers(admin))

        assert response.status_code == 404

    def test_update_role(self, client, admin, role_repository, tenant_id):
        role = role_repository.add_role(tenant_id, "Alpha")

        response = client.patch(f"{PREFIX}/roles/{role.id}", json={"name": "Beta"}, headers=headers(admin))

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Beta"

    def test_replace_system_role_permissions_warns(self, client, admin, role_repository, tenant_id):
        role = role_repository.add_role(tenant_id, DefaultRoles.EMPLOYEE, ["projects.view"], is_system=True)

        response = client.put(
            f"{PREFIX}/roles/{role.id}/permissions",
            json={"permissions": ["tasks.view", "tasks.view"]},
            headers=headers(admin)
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["permissions"] == ["tasks.view"]
        assert data["warning"]

    def test_get_role_permissions(self, client, admin, role_repository, tenant_id):
        role = role_repository.add_role(tenant_id, "Viewer", ["projects.view"])

        response = client.get(f"{PREFIX}/roles/{role.id}/permissions", headers=headers(admin))

        assert response.json()["data"]["permissions"] == ["projects.view"]

    def test_delete_referenced_role_conflicts(self, client, admin, actor_directory, role_repository, tenant_id):
        role = role_repository.add_role(tenant_id, "Estimator")
        actor_directory.add_actor(role=role)

        response = client.delete(f"{PREFIX}/roles/{role.id}", headers=headers(admin))

        assert response.status_code == 409
        assert role.id in role_repository.roles

    def test_delete_role(self, client, admin, role_repository, tenant_id):
        role = role_repository.add_role(tenant_id, "Temp")

        response = client.delete(f"{PREFIX}/roles/{role.id}", headers=headers(admin))

        assert response.status_code == 200
        assert role.id not in role_repository.roles

    def test_store_outage_is_503(self, client, admin, role_repository, tenant_id):
        role = role_repository.add_role(tenant_id, "Viewer")
        role_repository.fail = True

        response = client.get(f"{PREFIX}/roles/{role.id}", headers=headers(admin))

        assert response.status_code == 503


class TestRequirePermission:

    def test_role_grant(self, client, actor_directory, role_repository, tenant_id):
        role = role_repository.add_role(tenant_id, "Estimator", ["boq.*"])
        actor = actor_directory.add_actor(role=role)

        response = client.get(f"/projects/{uuid4()}/boq", headers=headers(actor))

        assert response.status_code == 200

    def test_denied_with_public_message(self, client, actor_directory):
        actor = actor_directory.add_actor()

        response = client.get(f"/projects/{uuid4()}/boq", headers=headers(actor))

        assert response.status_code == 403
        assert response.json()["message"] == "Permission denied: boq.view is required"

    def test_unknown_actor_indistinguishable_from_denial(self, client):
        response = client.get(f"/projects/{uuid4()}/boq", headers=headers(ActorId.generate()))

        assert response.status_code == 403
        assert response.json()["message"] == "Permission denied: boq.view is required"

    def test_resource_param_feeds_override(self, client, actor_directory, membership_store, resource_id):
        actor = actor_directory.add_actor()
        membership_store.overrides[(resource_id, actor)] = ResourceOverride(resource_id, actor, {"boq.view"})

        allowed = client.get(f"/projects/{resource_id}/boq", headers=headers(actor))
        other = client.get(f"/projects/{uuid4()}/boq", headers=headers(actor))

        assert allowed.status_code == 200
        assert other.status_code == 403

    def test_unparseable_resource_param_is_denied_not_rejected(self, client, actor_directory):
        actor = actor_directory.add_actor()

        response = client.get("/projects/proj-42/boq", headers=headers(actor))

        assert response.status_code == 403
        assert response.json()["message"] == "Permission denied: boq.view is required"

    def test_unparseable_resource_param_keeps_role_grant(self, client, actor_directory, role_repository, tenant_id):
        role = role_repository.add_role(tenant_id, "Estimator", ["boq.view"])
        actor = actor_directory.add_actor(role=role)

        assert client.get("/projects/proj-42/boq", headers=headers(actor)).status_code == 200

    def test_any_of_and_all_of(self, client, actor_directory, role_repository, tenant_id):
        role = role_repository.add_role(tenant_id, "Accounts", ["payments.view"])
        actor = actor_directory.add_actor(role=role)

        assert client.get("/reports", headers=headers(actor)).status_code == 200
        assert client.get("/ledger", headers=headers(actor)).status_code == 403
