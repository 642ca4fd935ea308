"""Tests for the exception hierarchy and HTTP mapping."""

import pytest

from neo_rbac.core.exceptions import (
    AuthenticationError, ConfigurationError, DatabaseError, InvalidPermissionError,
    NeoRBACError, PermissionDeniedError, RoleConflictError, RoleError,
    RoleNotFoundError, StoreUnavailableError, ValidationError,
    create_error_response, get_http_status_code
)


class TestHttpMapping:

    @pytest.mark.parametrize("exc_type,status", [
        (ValidationError, 400),
        (InvalidPermissionError, 400),
        (AuthenticationError, 401),
        (PermissionDeniedError, 403),
        (RoleNotFoundError, 404),
        (RoleConflictError, 409),
        (RoleError, 500),
        (DatabaseError, 500),
        (ConfigurationError, 500),
        (StoreUnavailableError, 503),
        (NeoRBACError, 500),
    ])
    def test_status_codes(self, exc_type, status):
        assert get_http_status_code(exc_type("boom")) == status

    def test_unmapped_subclass_uses_parent(self):
        class CustomConflict(RoleConflictError):
            pass

        assert get_http_status_code(CustomConflict("dup")) == 409

    def test_foreign_exception_is_500(self):
        assert get_http_status_code(RuntimeError("x")) == 500


class TestErrorResponse:

    def test_defaults(self):
        exc = RoleConflictError("Role exists", details={"name": "Admin"})

        assert exc.error_code == "RoleConflictError"
        assert create_error_response(exc) == {
            "error": {
                "code": "RoleConflictError",
                "message": "Role exists",
                "details": {"name": "Admin"},
                "type": "RoleConflictError",
            }
        }

    def test_custom_error_code(self):
        exc = InvalidPermissionError("bad", error_code="INVALID_PERMISSION")

        assert create_error_response(exc)["error"]["code"] == "INVALID_PERMISSION"
        assert exc.details == {}
