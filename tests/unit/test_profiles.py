"""Tests for profile edits."""

from __future__ import annotations

from decimal import Decimal

import pytest

from fieldops.auth.tokens import Caller
from fieldops.core.exceptions import (
    DocumentStoreError,
    Forbidden,
    IdentityProviderError,
    Internal,
    InvalidRequest,
    NotFound,
)
from fieldops.models.employee import Role
from fieldops.services.profiles import ProfileService, check_project_invariant
from tests.conftest import EMPLOYEES_PATH

ADMIN = Caller(id="admin-1", email="admin@example.com", role=Role.ADMIN)
MANAGER = Caller(id="mgr-1", email="mgr@example.com", role=Role.MANAGER)


@pytest.fixture
def service(identity, store):
    return ProfileService(identity=identity, store=store, employees_path=EMPLOYEES_PATH)


def _seed(identity, store, role: str, project_id: str | None = None) -> str:
    uid, _ = identity.add_identity(f"{uid_hint(role)}@example.com", role=role)
    store.write(EMPLOYEES_PATH, uid, {
        "userId": uid, "email": f"{uid_hint(role)}@example.com", "role": role,
        "firstName": "Ana", "lastName": "Cruz", "designation": "Tech",
        "dailyRate": Decimal("500"), "projectId": project_id,
    })
    store.calls.clear()
    identity.calls.clear()
    return uid


def uid_hint(role: str) -> str:
    return role.lower().replace(" ", "-")


class TestProjectInvariant:
    def test_field_employee_needs_project(self):
        with pytest.raises(InvalidRequest):
            check_project_invariant(Role.FIELD_EMPLOYEE, None)

    def test_other_roles_reject_project(self):
        with pytest.raises(InvalidRequest):
            check_project_invariant(Role.OFFICE_STAFF, "p-1")

    def test_valid_combinations(self):
        check_project_invariant(Role.FIELD_EMPLOYEE, "p-1")
        check_project_invariant(Role.MANAGER, None)


class TestUpdateProfile:
    def test_updates_plain_fields(self, service, identity, store):
        uid = _seed(identity, store, "Office Staff")
        updated = service.update_profile(ADMIN, uid, {"designation": " Senior Clerk ", "dailyRate": "820"})

        assert updated.designation == "Senior Clerk"
        assert updated.daily_rate == Decimal("820")
        stored = store.get(EMPLOYEES_PATH, uid)
        assert stored["designation"] == "Senior Clerk"
        assert stored["email"] == "office-staff@example.com"
        assert identity.called("set_role_claim") == []

    def test_empty_optional_field_becomes_null(self, service, identity, store):
        uid = _seed(identity, store, "Office Staff")
        service.update_profile(ADMIN, uid, {"department": "Ops"})
        updated = service.update_profile(ADMIN, uid, {"department": ""})
        assert updated.department is None

    def test_empty_required_field_rejected(self, service, identity, store):
        uid = _seed(identity, store, "Office Staff")
        with pytest.raises(InvalidRequest):
            service.update_profile(ADMIN, uid, {"firstName": "  "})

    def test_unknown_field_rejected(self, service, identity, store):
        uid = _seed(identity, store, "Office Staff")
        with pytest.raises(InvalidRequest, match="email"):
            service.update_profile(ADMIN, uid, {"email": "other@example.com"})
        assert store.called("write") == []

    def test_non_object_body(self, service):
        with pytest.raises(InvalidRequest):
            service.update_profile(ADMIN, "anyone", "designation=x")

    def test_missing_employee(self, service):
        with pytest.raises(NotFound):
            service.update_profile(ADMIN, "ghost", {"designation": "x"})

    def test_role_change_updates_claim(self, service, identity, store):
        uid = _seed(identity, store, "Office Staff")
        updated = service.update_profile(ADMIN, uid, {"role": "Manager"})
        assert updated.role == Role.MANAGER
        assert identity.get_role_claim(uid) == "Manager"
        assert store.get(EMPLOYEES_PATH, uid)["role"] == "Manager"

    def test_leaving_field_role_clears_project(self, service, identity, store):
        uid = _seed(identity, store, "Field Employee", project_id="p-7")
        updated = service.update_profile(ADMIN, uid, {"role": "Office Staff"})
        assert updated.project_id is None
        assert store.get(EMPLOYEES_PATH, uid)["projectId"] is None

    def test_becoming_field_employee_needs_project(self, service, identity, store):
        uid = _seed(identity, store, "Office Staff")
        with pytest.raises(InvalidRequest, match="Project assignment"):
            service.update_profile(ADMIN, uid, {"role": "Field Employee"})
        assert identity.get_role_claim(uid) == "Office Staff"

    def test_becoming_field_employee_with_project(self, service, identity, store):
        uid = _seed(identity, store, "Office Staff")
        updated = service.update_profile(ADMIN, uid, {"role": "Field Employee", "projectId": "p-3"})
        assert updated.project_id == "p-3"

    def test_clearing_project_of_field_employee_rejected(self, service, identity, store):
        uid = _seed(identity, store, "Field Employee", project_id="p-7")
        with pytest.raises(InvalidRequest):
            service.update_profile(ADMIN, uid, {"projectId": None})


class TestProfilePermissions:
    def test_manager_edits_field_employee(self, service, identity, store):
        uid = _seed(identity, store, "Field Employee", project_id="p-1")
        updated = service.update_profile(MANAGER, uid, {"projectId": "p-2"})
        assert updated.project_id == "p-2"

    def test_manager_cannot_edit_office_staff(self, service, identity, store):
        uid = _seed(identity, store, "Office Staff")
        with pytest.raises(Forbidden):
            service.update_profile(MANAGER, uid, {"designation": "x"})

    def test_manager_cannot_promote(self, service, identity, store):
        uid = _seed(identity, store, "Field Employee", project_id="p-1")
        with pytest.raises(Forbidden):
            service.update_profile(MANAGER, uid, {"role": "Manager"})
        assert identity.get_role_claim(uid) == "Field Employee"

    def test_caller_without_role(self, service, identity, store):
        uid = _seed(identity, store, "Field Employee", project_id="p-1")
        with pytest.raises(Forbidden):
            service.update_profile(Caller(id="x", email="", role=None), uid, {"designation": "y"})


class TestRoleClaimConsistency:
    def test_claim_failure_leaves_profile_untouched(self, service, identity, store):
        uid = _seed(identity, store, "Office Staff")
        identity.fail_on["set_role_claim"] = IdentityProviderError("down")
        with pytest.raises(Internal):
            service.update_profile(ADMIN, uid, {"role": "Manager"})
        assert store.called("write") == []
        assert store.get(EMPLOYEES_PATH, uid)["role"] == "Office Staff"

    def test_write_failure_restores_claim(self, service, identity, store):
        uid = _seed(identity, store, "Office Staff")
        store.fail_on["write"] = DocumentStoreError(EMPLOYEES_PATH, "unavailable")
        with pytest.raises(Internal):
            service.update_profile(ADMIN, uid, {"role": "Manager"})
        claims = [c[2] for c in identity.called("set_role_claim")]
        assert claims == ["Manager", "Office Staff"]
        assert identity.get_role_claim(uid) == "Office Staff"

    def test_write_failure_restores_the_claim_that_was_read(self, service, identity, store):
        uid = _seed(identity, store, "Office Staff")
        identity.set_role_claim(uid, "Manager")
        store.fail_on["write"] = DocumentStoreError(EMPLOYEES_PATH, "unavailable")

        with pytest.raises(Internal):
            service.update_profile(ADMIN, uid, {"role": "Field Employee", "projectId": "p-4"})

        assert identity.called("get_role_claim") == [("get_role_claim", uid)]
        assert identity.get_role_claim(uid) == "Manager"

    def test_claim_read_failure_changes_nothing(self, service, identity, store):
        uid = _seed(identity, store, "Office Staff")
        identity.fail_on["get_role_claim"] = IdentityProviderError("down")
        with pytest.raises(Internal):
            service.update_profile(ADMIN, uid, {"role": "Manager"})
        assert identity.called("set_role_claim") == []
        assert store.called("write") == []
