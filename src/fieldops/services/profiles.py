"""HR edits of existing employee profiles."""

from __future__ import annotations

import logging
from typing import Any

from fieldops.auth.permissions import can_create
from fieldops.auth.tokens import Caller
from fieldops.core.exceptions import (
    DocumentStoreError,
    Forbidden,
    IdentityProviderError,
    Internal,
    InvalidRequest,
    NotFound,
)
from fieldops.core.protocols import IDocumentStore, IIdentityProvider
from fieldops.models.employee import EmployeeProfile, Role, coerce_rate, parse_role

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "designation": "designation",
    "department": "department",
    "contactNumber": "contact_number",
    "dailyRate": "daily_rate",
    "projectId": "project_id",
    "role": "role",
}
NULLABLE_FIELDS = {"department", "contact_number", "project_id"}


def check_project_invariant(role: Role | None, project_id: str | None) -> None:
    """A project assignment exists if and only if the role is Field Employee."""
    if role == Role.FIELD_EMPLOYEE and not project_id:
        raise InvalidRequest("Project assignment is required for Field Employees.")
    if role != Role.FIELD_EMPLOYEE and project_id:
        raise InvalidRequest("Only Field Employees can be assigned to a project.")


def _normalize(changes: dict[str, Any]) -> dict[str, Any]:
    unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
    if unknown:
        raise InvalidRequest(f"Fields cannot be updated: {', '.join(unknown)}.")

    updates: dict[str, Any] = {}
    for wire_name, value in changes.items():
        field = EDITABLE_FIELDS[wire_name]
        if field == "daily_rate":
            value = coerce_rate(value)
        elif field == "role":
            role = parse_role(value)
            if role is None:
                raise InvalidRequest(f"Invalid role specified: {value}.")
            value = role
        elif isinstance(value, str):
            value = value.strip()
            if value == "":
                if field not in NULLABLE_FIELDS:
                    raise InvalidRequest(f"{wire_name} cannot be empty.")
                value = None
        elif value is not None or field not in NULLABLE_FIELDS:
            raise InvalidRequest(f"Invalid value for {wire_name}.")
        updates[field] = value
    return updates


class ProfileService:
    """Applies profile changes, keeping the role claim and profile in step."""

    def __init__(self, *, identity: IIdentityProvider, store: IDocumentStore, employees_path: str) -> None:
        self._identity = identity
        self._store = store
        self._employees_path = employees_path

    def get_profile(self, employee_id: str) -> EmployeeProfile:
        record = self._store.get(self._employees_path, employee_id)
        if record is None:
            raise NotFound(f"Employee {employee_id} not found.")
        return EmployeeProfile.from_record({**record, "id": employee_id})

    def update_profile(self, caller: Caller, employee_id: str, changes: Any) -> EmployeeProfile:
        if not isinstance(changes, dict):
            raise InvalidRequest("Invalid request body format.")
        updates = _normalize(changes)

        current = self.get_profile(employee_id)
        new_role = updates.get("role", current.role)
        if current.role is None or not can_create(caller.role, current.role) \
                or not can_create(caller.role, new_role):
            logger.warning(
                "Authorization denied: caller %s (%r) editing %s (%r -> %r)",
                caller.id, caller.role, employee_id, current.role, new_role,
            )
            raise Forbidden("Forbidden: Your role does not have permission to edit this user.")

        # Leaving the Field Employee role drops the project assignment.
        if current.role == Role.FIELD_EMPLOYEE and new_role != Role.FIELD_EMPLOYEE \
                and "project_id" not in updates:
            updates["project_id"] = None

        updated = current.model_copy(update=updates)
        check_project_invariant(updated.role, updated.project_id)

        role_changed = updated.role != current.role
        identity_id = updated.user_id or employee_id
        previous_claim: str | None = None
        if role_changed:
            previous_claim = self._set_claim(identity_id, updated.role)

        try:
            self._store.write(self._employees_path, employee_id, updated.to_record())
        except DocumentStoreError as exc:
            logger.exception("Profile write failed for %s", employee_id)
            if role_changed:
                self._restore_claim(identity_id, previous_claim or current.role.value)
            raise Internal("A server error occurred while saving user data. Please try again later.") from exc

        logger.info("Caller %s updated profile %s: %s", caller.id, employee_id, sorted(updates))
        return updated

    def _set_claim(self, identity_id: str, role: Role) -> str | None:
        """Set the role claim; returns the claim it replaced."""
        try:
            previous = self._identity.get_role_claim(identity_id)
            self._identity.set_role_claim(identity_id, role.value)
        except IdentityProviderError as exc:
            logger.error("Setting role claim on %s failed: %s", identity_id, exc)
            raise Internal("An unexpected error occurred while updating the user.") from exc
        return previous

    def _restore_claim(self, identity_id: str, claim: str) -> None:
        try:
            self._identity.set_role_claim(identity_id, claim)
        except Exception:
            logger.critical(
                "ROLE MISMATCH on %s: claim could not be restored to %r after a failed profile write",
                identity_id, claim, exc_info=True,
            )
